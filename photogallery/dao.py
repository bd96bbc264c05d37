import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from photogallery.models import Photo, User

logger = logging.getLogger(__name__)

PLACEHOLDER_PROFILE_PIC = "https://placehold.co/192x192/EFEFEF/3A3A3A?text={initial}"


def placeholder_profile_pic(username: str) -> str:
    """Return the generated avatar URL keyed by the first character of username."""
    return PLACEHOLDER_PROFILE_PIC.format(initial=username[:1])


def parse_tags(tags: str | None) -> list[str]:
    """
    Split a comma-separated tag string and trim each tag.
    Empty tags between commas are kept: "a,,b" -> ["a", "", "b"].
    """
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",")]


class UserDAO:
    """Data Access Object for User."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_recovery_answer(self, username: str, answer: str) -> User | None:
        return (
            self.db.query(User)
            .filter(User.username == username, User.answer == answer)
            .first()
        )

    def create(
        self,
        username: str,
        password: str,
        question: str | None = None,
        answer: str | None = None,
    ) -> User:
        user = User(
            username=username,
            password=password,
            question=question,
            answer=answer,
            profile_pic=placeholder_profile_pic(username),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except SQLAlchemyError:
            # Leaves the session usable after a lost race on the unique username
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def update_profile_pic(self, username: str, url: str) -> User | None:
        user = self.get_by_username(username)
        if user is None:
            return None
        user.profile_pic = url
        self.db.commit()
        self.db.refresh(user)
        return user

    def rename(self, user: User, new_username: str) -> User:
        """
        Rename a user and rewrite every photo's uploader and likes that
        reference the old name. All changes are committed together.
        """
        old_username = user.username
        try:
            user.username = new_username
            for photo in self.db.query(Photo).all():
                if photo.uploader == old_username:
                    photo.uploader = new_username
                if old_username in photo.likes:
                    renamed = [
                        new_username if name == old_username else name
                        for name in photo.likes
                    ]
                    photo.likes = list(dict.fromkeys(renamed))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.info("Renamed user %s to %s", old_username, new_username)
        return user


class PhotoDAO:
    """Data Access Object for Photo."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, photo_id: int) -> Photo | None:
        return self.db.get(Photo, photo_id)

    def list(self) -> Sequence[Photo]:
        # Newest first; ids are assigned in insertion order
        return self.db.query(Photo).order_by(Photo.id.desc()).all()

    def create(
        self,
        uploader: str,
        url: str,
        title: str | None = None,
        tags: str | None = None,
        description: str | None = None,
    ) -> Photo:
        photo = Photo(
            uploader=uploader,
            url=url,
            title=title,
            tags=parse_tags(tags),
            description=description,
            likes=[],
        )
        self.db.add(photo)
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def toggle_like(self, photo_id: int, username: str) -> Photo | None:
        photo = self.get(photo_id)
        if photo is None:
            return None
        likes = list(photo.likes or [])
        if username in likes:
            likes.remove(username)
        else:
            likes.append(username)
        # JSON columns only track reassignment, not in-place mutation
        photo.likes = likes
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def update(
        self,
        photo_id: int,
        title: str | None,
        tags: str | None,
        description: str | None,
    ) -> Photo | None:
        """Overwrite title, tags and description; omitted values are cleared."""
        photo = self.get(photo_id)
        if photo is None:
            return None
        photo.title = title
        photo.tags = parse_tags(tags)
        photo.description = description
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def delete(self, photo_id: int) -> bool:
        photo = self.get(photo_id)
        if photo is None:
            return False
        self.db.delete(photo)
        self.db.commit()
        return True
