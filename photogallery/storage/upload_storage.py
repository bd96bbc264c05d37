from abc import ABC, abstractmethod


class UploadStorage(ABC):
    """
    Interface for uploaded file storage backends.
    """

    @abstractmethod
    def save(self, field: str, filename: str, data: bytes) -> str:
        """
        Persist the raw bytes of an upload received in the given form field and
        return the public URL it is served from.
        """
        error_message = "save not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def delete(self, url: str) -> None:
        """
        Remove a previously saved upload given its public URL. Missing files
        are ignored.
        """
        error_message = "delete not implemented"
        raise NotImplementedError(error_message)
