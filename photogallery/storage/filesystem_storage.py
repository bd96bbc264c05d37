import time
from pathlib import Path

from .upload_storage import UploadStorage

URL_PREFIX = "/uploads"


def generate_filename(original_filename: str) -> str:
    """Millisecond timestamp followed by the original file extension."""
    return f"{int(time.time() * 1000)}{Path(original_filename).suffix}"


class FileSystemStorage(UploadStorage):
    """
    Upload storage on the local filesystem, one subdirectory per form field.
    Files land in <base_path>/<field>/ and are served under /uploads/<field>/.
    """
    def __init__(self, base_path: str = "./uploads") -> None:
        self.base_path = Path(base_path)

    def save(self, field: str, filename: str, data: bytes) -> str:
        dest = self.base_path / field
        dest.mkdir(parents=True, exist_ok=True)
        name = generate_filename(filename)
        (dest / name).write_bytes(data)
        return f"{URL_PREFIX}/{field}/{name}"

    def delete(self, url: str) -> None:
        relative = url.removeprefix(f"{URL_PREFIX}/")
        (self.base_path / relative).unlink(missing_ok=True)
