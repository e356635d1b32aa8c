"""Domain error taxonomy.

The core raises these and never chooses HTTP status codes itself; the
delivery layer (see ``sense_stage.main``) maps each kind onto a response.
Storage failures are not wrapped: ``sqlalchemy.exc.SQLAlchemyError`` reaches
the caller unchanged.
"""

from __future__ import annotations


class SenseError(Exception):
    """Base class for every error raised deliberately by the core."""

    code = "ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SenseError):
    """The requested entity does not exist or is not visible to the caller."""

    code = "NOT_FOUND"


class ForbiddenError(SenseError):
    """The caller is known but may not perform the operation."""

    code = "FORBIDDEN"


class NotAuthorError(ForbiddenError):
    """Mutation of a publication or comment by someone other than its author."""

    code = "NOT_AUTHOR"


class NotOwnerError(ForbiddenError):
    """Mutation of a media asset by someone other than its owner."""

    code = "NOT_OWNER"


class ValidationError(SenseError):
    """Malformed input rejected before any I/O."""

    code = "VALIDATION_ERROR"


class MediaNotOwnedError(ValidationError):
    """A referenced media asset is missing or owned by another user."""

    code = "MEDIA_NOT_OWNED"

    def __init__(self, media_id: str) -> None:
        super().__init__(f"Media {media_id} not found or not owned")
        self.media_id = media_id
