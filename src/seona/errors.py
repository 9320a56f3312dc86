"""Error taxonomy shared by services and routes.

Learn: Services raise these; a single exception handler in main.py
turns them into `{"code": ..., "message": ...}` JSON responses with
the class's HTTP status. Messages are fixed, caller-safe strings —
internal detail goes to the log, never into the response body.
"""

from typing import Optional


class SeonaError(Exception):
    """Base class. Subclasses pin the HTTP status and a default code."""

    status_code: int = 500
    code: str = "internal"
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None):
        self.message = message or self.message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class BadRequest(SeonaError):
    status_code = 400
    code = "bad-request"
    message = "Bad request"


class InvalidArgument(SeonaError):
    status_code = 400
    code = "invalid-argument"
    message = "Invalid argument"


class Unauthorized(SeonaError):
    status_code = 401
    code = "unauthorized"
    message = "Unauthorized"


class NotFound(SeonaError):
    status_code = 404
    code = "not-found"
    message = "Not found"


class InternalFailure(SeonaError):
    status_code = 500
    code = "internal"
    message = "Internal error"


class EncryptionFailed(InternalFailure):
    code = "encrypt"
    message = "Unable to encrypt identifier"


class MediaStorageError(InternalFailure):
    code = "upload-media"
    message = "Unable to store attachment"


class ThumbnailAssociationError(InternalFailure):
    code = "upsert-post"
    message = "Unable to set thumbnail"


class UpstreamUnavailable(SeonaError):
    """The remote key authority could not be reached or answered badly."""

    status_code = 503
    code = "upstream-unavailable"
    message = "Key authority unavailable"
