"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class ProcessRequest(BaseModel):
    """Canvas editor payload: a data URL plus processing parameters."""

    model_config = ConfigDict(populate_by_name=True)

    data_url: str | None = Field(default=None, alias="dataUrl")
    authority: str | None = None
    document_type: str | None = Field(default=None, alias="type")
    crop_mode: str | None = Field(default=None, alias="cropMode")
