"""Unified workflow exception taxonomy.

Provides a shared base exception hierarchy for the workflow core and its
collaborators. Every domain exception inherits from ``WorkflowError`` and
carries structured context fields so the controller can route failures
back to an inputtable stage and log them consistently.

Taxonomy categories
-------------------
- ``ValidationError``: local input/format violations, user corrects input.
- ``NotFoundError``: a place query resolved to nothing, user resubmits.
- ``TransportError``: live lookup service failure, retryable by the user.
- ``CancellationError``: work superseded by a newer action, never surfaced.
- ``PermanentError``: unrecoverable domain failures.

Every exception exposes ``to_error_dict()`` for a stable structured error
payload suitable for logging.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base exception for all workflow-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Workflow component where the error occurred
            (e.g. ``"geocoding"``, ``"boundary"``).
        code: Machine-readable error code (e.g. ``"QUERY_TOO_SHORT"``).
        retryable: Whether resubmitting the same request may succeed.
        correlation_id: Workflow run identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, NotFoundError):
            return "not_found"
        if isinstance(self, TransportError):
            return "transport"
        if isinstance(self, CancellationError):
            return "cancellation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transport" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(WorkflowError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class NotFoundError(WorkflowError):
    """A place query could not be resolved."""

    default_code = "NOT_FOUND"

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransportError(WorkflowError):
    """Live service failure (network, HTTP status, malformed response)."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class CancellationError(WorkflowError):
    """In-flight work superseded by a newer action."""

    default_code = "CANCELLED"

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(WorkflowError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
