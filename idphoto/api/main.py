"""FastAPI entrypoint and HTTP routes."""

import asyncio

from fastapi import FastAPI, File, Form, HTTPException, Response, UploadFile, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from idphoto.api.schemas import ProcessRequest
from idphoto.config.settings import get_settings
from idphoto.imgproc import CropMode, DecodeError, ImageProcessingError, SizeBudgetUnmet
from idphoto.monitoring.logging import configure_logging
from idphoto.services.data_url import InvalidDataUrlError, UnsupportedMediaError, decode_data_url
from idphoto.services.presets import Authority, DocumentType, InvalidDocumentTypeError
from idphoto.services.processing import ImageProcessingService, ProcessedImage

JPEG_EXTENSIONS = (".jpg", ".jpeg")
JPEG_CONTENT_TYPES = {"image/jpeg", "image/jpg"}


def _is_jpeg_upload(filename: str | None, content_type: str | None) -> bool:
    by_name = (filename or "").lower().endswith(JPEG_EXTENSIONS)
    by_type = (content_type or "").lower() in JPEG_CONTENT_TYPES
    return by_name or by_type


def _jpeg_response(result: ProcessedImage) -> Response:
    return Response(
        content=result.data,
        media_type="image/jpeg",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "X-Final-Size-KB": f"{result.size_kb:.2f}",
        },
    )


def _to_http_error(exc: ImageProcessingError) -> HTTPException:
    if isinstance(exc, DecodeError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or unsupported image file",
        )
    if isinstance(exc, SizeBudgetUnmet):
        return HTTPException(
            status_code=413,
            detail=f"{exc} Try using a smaller input or enable more aggressive cropping.",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to process image: {exc}",
    )


def create_app(service: ImageProcessingService | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()
    configure_logging()
    service = service or ImageProcessingService.from_settings(settings)

    app = FastAPI(
        title="ID Photo Normalizer API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
    )

    async def _normalise(image_bytes: bytes, **kwargs) -> ProcessedImage:
        try:
            return await asyncio.to_thread(service.process, image_bytes, **kwargs)
        except ImageProcessingError as exc:
            raise _to_http_error(exc) from exc

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/metrics", tags=["system"])
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/upload", tags=["images"])
    async def upload(
        file: UploadFile | None = File(default=None),
        document_type: str = Form(..., alias="type"),
        authority: str | None = Form(default=None),
    ) -> Response:
        """Normalise a directly uploaded JPEG with the contain strategy."""

        image_bytes = await file.read() if file is not None else b""
        if not image_bytes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

        if not _is_jpeg_upload(file.filename, file.content_type):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Only JPG/JPEG images are accepted. Please convert your image to JPG and try again.",
            )

        try:
            parsed_type = DocumentType.parse(document_type)
        except InvalidDocumentTypeError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

        result = await _normalise(
            image_bytes,
            document_type=parsed_type,
            authority=Authority.parse(authority, default=settings.default_authority),
            crop_mode=CropMode.CONTAIN,
            enforce_ceiling=False,
        )
        return _jpeg_response(result)

    @app.post("/process", tags=["images"])
    async def process_from_canvas(payload: ProcessRequest) -> Response:
        """Normalise a data URL from the canvas editor and enforce the size ceiling."""

        try:
            image_bytes = decode_data_url(payload.data_url)
        except UnsupportedMediaError as exc:
            raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc
        except InvalidDataUrlError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

        try:
            parsed_type = DocumentType.parse(payload.document_type)
        except InvalidDocumentTypeError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid type parameter") from exc

        result = await _normalise(
            image_bytes,
            document_type=parsed_type,
            authority=Authority.parse(payload.authority, default=settings.default_authority),
            crop_mode=CropMode.from_editor_value(payload.crop_mode),
            enforce_ceiling=True,
        )
        return _jpeg_response(result)

    return app


app = create_app()
