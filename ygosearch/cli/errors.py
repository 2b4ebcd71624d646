from __future__ import annotations

from typing import Any

from ygosearch.exceptions import YgoSearchError


class CLIError(YgoSearchError):
    """A failure in CLI input or configuration, reported with its own exit code."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    @classmethod
    def usage(cls, message: str, *, hint: str | None = None) -> CLIError:
        return cls(message, exit_code=2, error_type="usage_error", hint=hint)

    @classmethod
    def config(cls, message: str, *, hint: str | None = None) -> CLIError:
        return cls(message, exit_code=2, error_type="config_error", hint=hint)
