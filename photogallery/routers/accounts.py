import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from photogallery.dao import UserDAO
from photogallery.deps import get_db, get_storage
from photogallery.models import User
from photogallery.schemas import (
    LoginRequest,
    MessageResponse,
    ProfilePicResponse,
    RecoverRequest,
    RenameRequest,
    SignupRequest,
    UserPayloadResponse,
    UserResponse,
)
from photogallery.storage import UploadStorage
from photogallery.utils.errors import handle_db_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

USER_NOT_FOUND = "User not found"
USERNAME_TAKEN = "Username already exists"


def to_user_response(user: User) -> UserResponse:
    """Public view of a user; password and recovery fields are never included."""
    return UserResponse(username=user.username, profilePic=user.profile_pic)


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
)
@handle_db_errors("Signup failed")
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | MessageResponse:
    dao = UserDAO(db)
    if dao.get_by_username(body.username) is not None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": USERNAME_TAKEN},
        )
    try:
        dao.create(body.username, body.password, body.question, body.answer)
    except IntegrityError:
        # A concurrent signup took the name between the check and the insert
        logger.warning("Signup race lost for username %s", body.username)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": USERNAME_TAKEN},
        )
    logger.info("Created user %s", body.username)
    return MessageResponse(message="Signup successful")


@router.post("/login", response_model=UserPayloadResponse)
@handle_db_errors("Login failed")
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | UserPayloadResponse:
    """
    Check username and password. A known username with the wrong password
    gets its recovery question back so the client can offer recovery login.
    """
    user = UserDAO(db).get_by_username(body.username)
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid username or password"},
        )
    if user.password != body.password:
        logger.warning("Wrong password for user %s", body.username)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "detail": "Incorrect password",
                "needsRecovery": True,
                "question": user.question,
            },
        )
    return UserPayloadResponse(message="Login successful", user=to_user_response(user))


@router.post("/login/recover", response_model=UserPayloadResponse)
@handle_db_errors("Login failed")
def recover_login(
    body: RecoverRequest,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | UserPayloadResponse:
    user = UserDAO(db).get_by_recovery_answer(body.username, body.answer)
    if user is None:
        logger.warning("Wrong recovery answer for user %s", body.username)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Incorrect answer"},
        )
    return UserPayloadResponse(message="Login successful", user=to_user_response(user))


@router.post("/profile/upload", response_model=ProfilePicResponse)
@handle_db_errors("Profile picture upload failed")
def upload_profile_pic(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_storage)],
    profile_pic: Annotated[UploadFile | None, File(alias="profilePic")] = None,
    username: Annotated[str | None, Form()] = None,
) -> JSONResponse | ProfilePicResponse:
    if profile_pic is None or not profile_pic.filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "No file uploaded"},
        )
    dao = UserDAO(db)
    if username is None or dao.get_by_username(username) is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": USER_NOT_FOUND},
        )
    url = storage.save("profilePic", profile_pic.filename, profile_pic.file.read())
    try:
        dao.update_profile_pic(username, url)
    except SQLAlchemyError:
        storage.delete(url)
        raise
    logger.info("Updated profile picture for %s: %s", username, url)
    return ProfilePicResponse(message="Profile picture updated", profilePicUrl=url)


@router.post("/users/update", response_model=UserPayloadResponse)
@handle_db_errors("Username update failed")
def update_username(
    body: RenameRequest,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | UserPayloadResponse:
    dao = UserDAO(db)
    user = dao.get_by_username(body.oldUsername)
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": USER_NOT_FOUND},
        )
    if body.newUsername != body.oldUsername:
        if dao.get_by_username(body.newUsername) is not None:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": USERNAME_TAKEN},
            )
        user = dao.rename(user, body.newUsername)
    return UserPayloadResponse(
        message="Username updated", user=to_user_response(user)
    )


@router.get("/users/{username}", response_model=UserResponse)
@handle_db_errors("Failed to load user")
def get_user_profile(
    username: str,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse | UserResponse:
    user = UserDAO(db).get_by_username(username)
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": USER_NOT_FOUND},
        )
    return to_user_response(user)
