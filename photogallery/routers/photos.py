import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from photogallery.dao import PhotoDAO
from photogallery.deps import get_db, get_storage
from photogallery.models import Photo
from photogallery.schemas import (
    LikeRequest,
    LikeResponse,
    MessageResponse,
    PhotoPayloadResponse,
    PhotoResponse,
    PhotoUpdateRequest,
)
from photogallery.storage import UploadStorage
from photogallery.utils.errors import handle_db_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

PHOTO_NOT_FOUND = "Photo not found"


def to_photo_response(photo: Photo) -> PhotoResponse:
    return PhotoResponse(
        id=photo.id,
        uploader=photo.uploader,
        url=photo.url,
        title=photo.title,
        tags=photo.tags,
        description=photo.description,
        likes=photo.likes,
    )


@router.get("/photos", response_model=list[PhotoResponse])
@handle_db_errors("Failed to load photos")
def get_photos(
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | list[PhotoResponse]:
    # Whole collection, newest first; there is no pagination
    return [to_photo_response(photo) for photo in PhotoDAO(db).list()]


@router.post(
    "/photos/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=PhotoPayloadResponse,
)
@handle_db_errors("Upload failed")
def upload_photo(  # noqa: PLR0913
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_storage)],
    photo: Annotated[UploadFile | None, File()] = None,
    uploader: Annotated[str | None, Form()] = None,
    title: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
) -> JSONResponse | PhotoPayloadResponse:
    if photo is None or not photo.filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "A photo file is required"},
        )
    if not uploader:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Uploader is required"},
        )
    url = storage.save("photo", photo.filename, photo.file.read())
    try:
        created = PhotoDAO(db).create(
            uploader=uploader,
            url=url,
            title=title,
            tags=tags,
            description=description,
        )
    except SQLAlchemyError:
        # No row points at the file, so do not keep it
        storage.delete(url)
        raise
    logger.info("Photo %s uploaded by %s to %s", created.id, uploader, url)
    return PhotoPayloadResponse(
        message="Photo uploaded", photo=to_photo_response(created)
    )


@router.post("/photos/like", response_model=LikeResponse)
@handle_db_errors("Failed to update likes")
def toggle_like(
    body: LikeRequest,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | LikeResponse:
    photo = PhotoDAO(db).toggle_like(body.photoId, body.username)
    if photo is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": PHOTO_NOT_FOUND},
        )
    return LikeResponse(likes=photo.likes)


@router.put("/photos/{photo_id}", response_model=PhotoPayloadResponse)
@handle_db_errors("Failed to update photo")
def update_photo(
    photo_id: int,
    db: Annotated[Session, Depends(get_db)],
    body: Annotated[PhotoUpdateRequest | None, Body()] = None,
) -> JSONResponse | PhotoPayloadResponse:
    """
    Replace title, tags and description. Fields missing from the body are
    cleared rather than left as they were.
    """
    if body is None:
        body = PhotoUpdateRequest()
    photo = PhotoDAO(db).update(
        photo_id,
        title=body.title,
        tags=body.tags,
        description=body.description,
    )
    if photo is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": PHOTO_NOT_FOUND},
        )
    return PhotoPayloadResponse(message="Photo updated", photo=to_photo_response(photo))


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
@handle_db_errors("Failed to delete photo")
def delete_photo(
    photo_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse | JSONResponse:
    # Unknown ids are not an error
    if PhotoDAO(db).delete(photo_id):
        logger.info("Deleted photo %s", photo_id)
    return MessageResponse(message="Photo deleted")
