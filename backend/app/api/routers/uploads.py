"""Operator upload endpoint running the blob-then-entry pipeline server-side."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ...api.dependencies import get_upload_pipeline
from ...api.schemas import EntryResponse, http_error, serialize_entry
from ...domain.errors import (
    InputError,
    MetadataCommitFailedAfterUpload,
    StorageUnavailable,
    UploadError,
    ValidationError,
)
from ...domain.uploads import UploadPipeline, UploadRequest
from ...infra.logging import get_logger

router = APIRouter(prefix="/uploads", tags=["uploads"])
logger = get_logger(__name__)

MULTIPLE_SOURCES_MESSAGE = "Provide either a file or an image URL, not both"


@router.post(
    "",
    response_model=EntryResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a photo file or register an image URL",
)
def upload_entry(
    file: Optional[UploadFile] = File(default=None),
    image_url: Optional[str] = Form(default=None),
    caption: Optional[str] = Form(default=None),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
) -> EntryResponse:
    request = UploadRequest(
        file_bytes=file.file.read() if file is not None else None,
        image_url=image_url,
        caption=caption,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
    )
    try:
        entry = pipeline.submit(request)
    except InputError as exc:
        if exc.code == "multiple_image_sources":
            raise http_error(
                status.HTTP_400_BAD_REQUEST,
                "GALLERY-INPUT-AMBIGUOUS",
                MULTIPLE_SOURCES_MESSAGE,
                {"reason": exc.code},
            ) from exc
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "GALLERY-INPUT-MISSING",
            "Please select a photo or provide an image URL",
            {"reason": exc.code},
        ) from exc
    except ValidationError as exc:
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "GALLERY-INVALID-REQUEST",
            str(exc),
        ) from exc
    except UploadError as exc:
        raise http_error(
            status.HTTP_502_BAD_GATEWAY,
            "GALLERY-UPLOAD-FAILED",
            f"Upload failed: {exc.reason}",
            {"reason": exc.reason},
        ) from exc
    except MetadataCommitFailedAfterUpload as exc:
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "METADATA_COMMIT_FAILED_AFTER_UPLOAD",
            "Photo stored but the gallery entry could not be saved",
            {"imageRef": exc.image_ref, "caption": exc.caption},
        ) from exc
    except StorageUnavailable as exc:
        raise http_error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "GALLERY-STORAGE-UNAVAILABLE",
            "Failed to create gallery entry",
        ) from exc
    finally:
        if file is not None:
            file.file.close()
    logger.info(
        "uploads_api_entry_created",
        extra={"entry_id": entry.entry_id, "has_file": request.has_file},
    )
    return serialize_entry(entry)
