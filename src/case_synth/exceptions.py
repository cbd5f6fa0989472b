"""Exception hierarchy for case-synth.

Every error carries a stable ``code`` so the orchestrator can report it
through :class:`~case_synth.models.CaseError` without leaking exceptions
past the public boundary.
"""

from __future__ import annotations


class CaseSynthError(Exception):
    """Base exception for all case-synth errors."""

    code = "CaseSynthError"


# ── Validation (raised before any external side effect) ──────────────


class CaseValidationError(CaseSynthError):
    """Base for request validation failures."""

    code = "ValidationError"


class UnknownCaseType(CaseValidationError):
    """The requested case type is not registered."""

    code = "UnknownCaseType"

    def __init__(self, case_type_id: str, available: list[str] | None = None) -> None:
        self.case_type_id = case_type_id
        self.available = sorted(available or [])
        if case_type_id:
            message = f"Invalid case type specified: {case_type_id!r}"
        else:
            message = "Case type must be provided"
        if self.available:
            message += f". Available: {self.available}"
        super().__init__(message)


class MissingRequiredInput(CaseValidationError):
    """A caller input the case type requires was not supplied."""

    code = "MissingRequiredInput"

    def __init__(self, case_type_id: str, input_name: str) -> None:
        self.case_type_id = case_type_id
        self.input_name = input_name
        super().__init__(f"{input_name!r} must be provided for case type {case_type_id!r}")


class BatchNotSupported(CaseValidationError):
    """More than one case was requested for a non-batchable type."""

    code = "BatchNotSupported"

    def __init__(self, case_type_id: str, num_cases: int) -> None:
        self.case_type_id = case_type_id
        self.num_cases = num_cases
        super().__init__(
            f"Creating multiple cases is not supported for {case_type_id!r} "
            f"(requested {num_cases})"
        )


class InvalidBatchSize(CaseValidationError):
    """``num_cases`` was zero or negative."""

    code = "InvalidBatchSize"

    def __init__(self, num_cases: int) -> None:
        self.num_cases = num_cases
        super().__init__(f"num_cases must be >= 1, got {num_cases}")


# ── Field resolution ─────────────────────────────────────────────────


class EmptyChoiceSet(CaseSynthError):
    """A RandomChoice field spec has nothing to choose from."""

    code = "EmptyChoiceSet"


class FieldResolutionError(CaseSynthError):
    """A field spec could not be resolved (bad reference, bad template)."""

    code = "FieldResolutionError"


# ── Record store ─────────────────────────────────────────────────────


class PersistenceFailure(CaseSynthError):
    """The record store rejected an insert or update."""

    code = "PersistenceFailure"

    def __init__(self, message: str, diagnostic: str = "") -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class RecordNotFound(CaseSynthError):
    """A record id does not exist in the given collection."""

    code = "RecordNotFound"


class AttachmentFailure(CaseSynthError):
    """The record store could not write an attachment."""

    code = "AttachmentFailure"


# ── Content generation ───────────────────────────────────────────────


class ContentGenerationDegraded(CaseSynthError):
    """Generated text was replaced by fallback text. Never raised past the generator."""

    code = "ContentGenerationDegraded"

    def __init__(self, message: str, prompt: str = "") -> None:
        super().__init__(message)
        self.prompt = prompt


class LLMClientError(CaseSynthError):
    """Raised when LLM API calls fail after exhausting retries."""

    code = "LLMClientError"


class RetryableError(LLMClientError):
    """Rate limits, timeouts, 5xx: should be retried."""


class NonRetryableError(LLMClientError):
    """Auth errors, bad requests, 4xx (non-429): fail immediately."""


__all__ = [
    "CaseSynthError",
    "CaseValidationError",
    "UnknownCaseType",
    "MissingRequiredInput",
    "BatchNotSupported",
    "InvalidBatchSize",
    "EmptyChoiceSet",
    "FieldResolutionError",
    "PersistenceFailure",
    "RecordNotFound",
    "AttachmentFailure",
    "ContentGenerationDegraded",
    "LLMClientError",
    "RetryableError",
    "NonRetryableError",
]
