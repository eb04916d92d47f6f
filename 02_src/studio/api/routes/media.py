"""Attachment upload and media generation routes."""

from fastapi import APIRouter, HTTPException, UploadFile, status
from pydantic import BaseModel

from ...app import Application
from ...attachments import ingest_file
from ...errors import StudioError
from ...logging_config import get_logger
from ...models import ImageModel
from ..errors import to_http_exception
from .lanes import AttachmentPayload

logger = get_logger(__name__)

MAX_UPLOAD_SIZE = 20 * 1024 * 1024  # inline request limit


class ImageRequest(BaseModel):
    prompt: str
    model: ImageModel = ImageModel.FLASH_IMAGE


class ImageResponse(BaseModel):
    data_uri: str | None


class VideoRequest(BaseModel):
    prompt: str
    aspect_ratio: str = "16:9"


class VideoResponse(BaseModel):
    uri: str | None


def create_media_router(app: Application) -> APIRouter:
    """Create media router."""
    router = APIRouter(prefix="/api", tags=["media"])

    @router.post("/attachments", response_model=AttachmentPayload)
    async def upload_attachment(file: UploadFile) -> AttachmentPayload:
        """Classify an uploaded file and return it ready to attach."""
        if not file.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Filename is required",
            )

        content = await file.read()
        if len(content) > MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds maximum size of {MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
            )

        try:
            attachment = ingest_file(file.filename, content, file.content_type)
        except StudioError as e:
            logger.warning(f"Attachment rejected: {file.filename}: {e}")
            raise to_http_exception(e) from e
        return AttachmentPayload.from_attachment(attachment)

    @router.post("/images", response_model=ImageResponse)
    async def generate_image(request: ImageRequest) -> ImageResponse:
        """Generate one image."""
        try:
            image = await app.image_generator.generate(request.prompt, request.model)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except StudioError as e:
            raise to_http_exception(e) from e
        return ImageResponse(data_uri=image.data_uri if image else None)

    @router.post("/videos", response_model=VideoResponse)
    async def generate_video(request: VideoRequest) -> VideoResponse:
        """Generate one video. Blocks until the operation finishes."""
        try:
            result = await app.video_generator.generate(request.prompt, request.aspect_ratio)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except StudioError as e:
            raise to_http_exception(e) from e
        return VideoResponse(uri=result.uri if result else None)

    return router
