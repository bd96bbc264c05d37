from collections.abc import Generator

from sqlalchemy.orm import Session

from photogallery.database import SessionLocal
from photogallery.storage import UploadStorage, get_storage_backend


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session and closes it when done.
    This function creates a new database session and ensures it's properly
    closed when the request is complete, regardless of whether an exception
    occurs. Closing rolls back anything left uncommitted.
    Yields:
        Session: SQLAlchemy database session
    """
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> UploadStorage:
    """Dependency returning the configured upload storage backend."""
    return get_storage_backend()
