"""
Structured Error Taxonomy — Typed exceptions for the ActionFlow catalog.

Design principles:
  - Every error carries an `error_code` for scripts and logs
  - Discovery and metadata problems never raise; they degrade the catalog
  - Install problems are returned as InstallResult data, not raised
  - Lookup problems (unknown workflow or variant) are the only raised errors
  - Structured logging friendly: all errors serialize cleanly to JSON
"""

from __future__ import annotations

__all__ = [
    "ActionFlowError",
    "LookupFailedError",
    "WorkflowNotFoundError",
    "VariantNotFoundError",
]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Base
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ActionFlowError(Exception):
    """Root exception for ActionFlow.

    Attributes:
        error_code: Machine-readable code for scripts and log filters.
        exit_code: Suggested process exit status for the CLI.
    """

    error_code: str = "ACTIONFLOW_ERROR"
    exit_code: int = 1

    def __init__(self, message: str, *, detail: str | None = None):
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize for structured logging and JSON output."""
        return {
            "error_code": self.error_code,
            "message": str(self),
            "detail": self.detail,
        }


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Lookup Layer — Unknown workflow ids and variant names
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class LookupFailedError(ActionFlowError):
    """Base for catalog lookups that found nothing."""

    error_code = "LOOKUP_FAILED"

    def __init__(self, message: str, *, available: list[str] | None = None, **kwargs):
        self.available = available or []
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["available"] = self.available
        return d


class WorkflowNotFoundError(LookupFailedError):
    """No workflow with the requested id exists in the loaded catalog."""

    error_code = "WORKFLOW_NOT_FOUND"

    def __init__(self, message: str, *, workflow_id: str = "", **kwargs):
        self.workflow_id = workflow_id
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["workflow_id"] = self.workflow_id
        return d


class VariantNotFoundError(LookupFailedError):
    """The workflow exists but has no variant with the requested name."""

    error_code = "VARIANT_NOT_FOUND"

    def __init__(self, message: str, *, workflow_id: str = "", variant: str = "", **kwargs):
        self.workflow_id = workflow_id
        self.variant = variant
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["workflow_id"] = self.workflow_id
        d["variant"] = self.variant
        return d
