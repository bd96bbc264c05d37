# Field names follow the JSON wire format, hence the camelCase
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str


class SignupRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    question: str | None = None
    answer: str | None = None


class LoginRequest(BaseModel):
    username: str
    password: str


class RecoverRequest(BaseModel):
    username: str
    answer: str


class UserResponse(BaseModel):
    username: str
    profilePic: str  # noqa: N815


class UserPayloadResponse(BaseModel):
    message: str
    user: UserResponse


class ProfilePicResponse(BaseModel):
    message: str
    profilePicUrl: str  # noqa: N815


class RenameRequest(BaseModel):
    oldUsername: str  # noqa: N815
    newUsername: str = Field(min_length=1)  # noqa: N815


class PhotoResponse(BaseModel):
    id: int
    uploader: str
    url: str
    title: str | None
    tags: list[str]
    description: str | None
    likes: list[str]


class PhotoPayloadResponse(BaseModel):
    message: str
    photo: PhotoResponse


class LikeRequest(BaseModel):
    photoId: int  # noqa: N815
    username: str


class LikeResponse(BaseModel):
    likes: list[str]


class PhotoUpdateRequest(BaseModel):
    title: str | None = None
    tags: str | None = None
    description: str | None = None
