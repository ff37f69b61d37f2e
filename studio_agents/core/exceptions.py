"""
Structured exceptions for the studio pipeline.

Every failure in the pipeline is terminal for the current invocation and
carries a human-readable message suitable for direct display, plus a
machine-readable error code and an HTTP status for the API layer.
"""

from typing import Any, Dict, List, Optional


class StudioError(Exception):
    """
    Base exception for all studio pipeline errors.

    All custom exceptions inherit from this class, providing consistent
    error code and detail handling.
    """

    error_code: str = "STUDIO_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigError(StudioError):
    """Raised when required configuration (API key, model) is missing."""

    error_code = "CONFIG_ERROR"
    http_status = 500


class ValidationError(StudioError):
    """
    Input validation errors.

    Raised synchronously before any network call, e.g. for mutually
    exclusive image inputs or a missing brief. Always recoverable by the
    user correcting their input.
    """

    error_code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(
        self,
        message: str,
        fields: Optional[List[str]] = None,
        **kwargs,
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            fields: Names of the offending input fields
            **kwargs: Additional arguments for parent class
        """
        super().__init__(message, **kwargs)
        self.fields = fields or []
        self.details["fields"] = self.fields


class UnsupportedMimeTypeError(ValidationError):
    """Raised when an uploaded image has a MIME type the model does not accept."""

    error_code = "UNSUPPORTED_MIME_TYPE"
    http_status = 415


class EncodingError(StudioError):
    """
    Image encoding errors.

    Raised when a supplied image resource cannot be read or converted
    to the wire format. Aborts the whole request.
    """

    error_code = "ENCODING_ERROR"
    http_status = 422

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.filename = filename
        if filename:
            self.details["filename"] = filename


class OrchestrationError(StudioError):
    """
    Prompt orchestration errors.

    Base class for failures of the Planner or Writer stages.
    """

    error_code = "ORCHESTRATION_ERROR"
    http_status = 502
    stage: str = ""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        if self.stage:
            self.details.setdefault("stage", self.stage)


class PlannerEmptyResponseError(OrchestrationError):
    """Raised when the Planner stage returns no text."""

    error_code = "PLANNER_EMPTY_RESPONSE"
    stage = "planner"


class PlannerMalformedResponseError(OrchestrationError):
    """Raised when the Planner response has no **Checklist** section."""

    error_code = "PLANNER_MALFORMED_RESPONSE"
    stage = "planner"


class WriterEmptyResponseError(OrchestrationError):
    """Raised when the Writer stage returns no text."""

    error_code = "WRITER_EMPTY_RESPONSE"
    stage = "writer"


class WriterMalformedResponseError(OrchestrationError):
    """Raised when the final prompt section cannot be located in the Writer response."""

    error_code = "WRITER_MALFORMED_RESPONSE"
    stage = "writer"


class NoImageDataError(StudioError):
    """
    No image data error.

    Raised when image generation requests completed but none of them
    contained image payloads (e.g. the prompt was safety filtered).
    """

    error_code = "NO_IMAGE_DATA"
    http_status = 502

    def __init__(
        self,
        message: str,
        failures: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.failures = failures or []
        self.details["failures"] = self.failures


class TransportError(StudioError):
    """
    Generic network or service failure.

    Raised for connection errors and non-success responses from the
    generative service.
    """

    error_code = "TRANSPORT_ERROR"
    http_status = 502

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code


class GenerationTimeoutError(TransportError, TimeoutError):
    """Raised when a request to the generative service times out."""

    error_code = "GENERATION_TIMEOUT"
    http_status = 504
