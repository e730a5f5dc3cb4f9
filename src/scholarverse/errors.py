"""Error taxonomy shared by the store, the explanation engine and the web API."""

from __future__ import annotations


class ScholarverseError(Exception):
    """Base class. ``status_code`` is the HTTP status the web layer answers with."""

    status_code = 500


class StorageError(ScholarverseError):
    """A persisted record is malformed or the storage medium is inaccessible."""


class CredentialError(ScholarverseError):
    status_code = 401


class NetworkError(ScholarverseError):
    """Fetching an image or calling the AI service failed."""

    status_code = 502


class NotFoundError(ScholarverseError):
    status_code = 404

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ValidationError(ScholarverseError):
    status_code = 400


class AccessDeniedError(ScholarverseError):
    """The book is not in the user's library."""

    status_code = 403
