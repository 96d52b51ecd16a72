"""Error taxonomy shared by services, adapters and the HTTP boundary."""

from http import HTTPStatus


class FitnessCoachError(Exception):
    """Base error carrying a user-facing message and optional details."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(FitnessCoachError):
    """A required credential or setting is missing."""


class ValidationError(FitnessCoachError):
    """Required input is missing or malformed."""

    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(FitnessCoachError):
    """A referenced record does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class UpstreamError(FitnessCoachError):
    """The generative model call failed or timed out."""


class ParseError(FitnessCoachError):
    """The model response did not contain the expected JSON."""

    def __init__(
        self, message: str, raw_text: str, details: object | None = None
    ) -> None:
        super().__init__(message, details)
        self.raw_text = raw_text


class PersistenceError(FitnessCoachError):
    """The backend store rejected a read or write."""


class PoseFlowError(FitnessCoachError):
    """Terminal failure of a live pose-detection session."""


class CameraPermissionError(PoseFlowError, PermissionError):
    """The camera could not be opened."""


class ModelLoadError(PoseFlowError):
    """The pose estimation model failed to initialize."""


class RequestInProgressError(FitnessCoachError):
    """A generation for the same user is still running."""

    status_code = HTTPStatus.CONFLICT
