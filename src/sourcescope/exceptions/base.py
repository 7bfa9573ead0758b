"""Base exception for SourceScope."""

from typing import Dict, Mapping, Optional


class SourceScopeError(Exception):
    """Base exception for all SourceScope errors.

    ``details`` values are stringified and ``None`` values dropped, so an error
    renders the same in log lines, job records and progress events.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, object]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {
            key: str(value) for key, value in (details or {}).items() if value is not None
        }

    @property
    def summary(self) -> str:
        """``message: reason`` when a reason is known, else the message."""
        reason = self.details.get("reason")
        return f"{self.message}: {reason}" if reason else self.message

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
