from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from photogallery.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )
    # Plaintext; login compares by equality
    password: Mapped[str] = mapped_column(String, nullable=False)
    question: Mapped[str | None] = mapped_column(Text, nullable=True)
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_pic: Mapped[str] = mapped_column("profilePic", String, nullable=False)


class Photo(Base):
    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    uploader: Mapped[str] = mapped_column(String, index=True, nullable=False)
    url: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # Usernames; treated as a set, never holds duplicates
    likes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
