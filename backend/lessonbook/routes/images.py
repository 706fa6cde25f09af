"""
LessonBook Backend — Lesson Image Route
=========================================

What:  Serves lesson images from IMAGES_ROOT under /images/{file_path}.
Who:   Called by <img> tags in the frontend that reference a lesson's `image`.

Missing files answer with the JSON 404 body used by the rest of the API.
"""

import logging
import mimetypes
from pathlib import Path

from aiofiles import os as aios
from fastapi import APIRouter
from fastapi.responses import FileResponse

from lessonbook.config import settings
from lessonbook.exceptions import NotFoundError, ValidationError
from lessonbook.schemas.documents import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["Images"])


@router.get(
    "/{file_path:path}",
    summary="Serve a lesson image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Path escapes the image directory", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_image(file_path: str) -> FileResponse:
    images_root = Path(settings.images_root).resolve()
    full_path = (images_root / file_path).resolve()

    # The resolved path must stay inside IMAGES_ROOT (no ../ traversal)
    if not full_path.is_relative_to(images_root):
        raise ValidationError(message="Invalid file path.", field="file_path")

    if not await aios.path.isfile(full_path):
        raise NotFoundError(
            resource="file",
            resource_id=file_path,
            message="File not found",
        )

    media_type, _ = mimetypes.guess_type(full_path.name)
    return FileResponse(
        path=str(full_path),
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=86400"},
    )
