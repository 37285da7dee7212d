"""Exception taxonomy shared by the synthesizer, collaborators and the API layer.

Every error carries the HTTP status the router should answer with when it
escapes to the caller. Downstream errors are normally caught per attempt by
GenerationService and only reach the router when the whole request fails.
"""


class PixcraftError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    code: str = "internal"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or self.__class__.__doc__ or self.code


# --- Synthesizer / configuration -------------------------------------------


class UnknownScene(PixcraftError):
    """Scene identifier is not present in the scene tables."""

    status_code = 400
    code = "invalid-argument"

    def __init__(self, scene_id: str) -> None:
        super().__init__(f"Unknown scene: {scene_id!r}")
        self.scene_id = scene_id


class InvalidDimensions(PixcraftError):
    """Image width/height are missing or not positive."""

    status_code = 400
    code = "invalid-argument"


class SceneConfigurationError(PixcraftError):
    """Scene tables are inconsistent (an id is missing from one of them)."""


# --- Downstream collaborators ----------------------------------------------


class DownstreamError(PixcraftError):
    """Base class for failures of external services."""


class DownstreamUnavailable(DownstreamError):
    """External service errored or could not be reached."""


class DownstreamRateLimited(DownstreamError):
    """External service rejected the call with a rate-limit signal."""


class DownstreamEmptyResult(DownstreamError):
    """External service answered without any content."""


# --- Request level ----------------------------------------------------------


class Unauthenticated(PixcraftError):
    """User must be authenticated."""

    status_code = 401
    code = "unauthenticated"


class InvalidArgument(PixcraftError):
    """Request is missing fields or contains invalid values."""

    status_code = 400
    code = "invalid-argument"


class PermissionDenied(PixcraftError):
    """User ID does not match authenticated user."""

    status_code = 403
    code = "permission-denied"


class GenerationFailed(PixcraftError):
    """Failed to generate photo variations."""
