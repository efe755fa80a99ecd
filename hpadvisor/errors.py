# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/errors.py
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations


class InputValidationError(ValueError):
    """Energy data failed one or more preconditions.

    ``failures`` holds ``(field, message)`` pairs, one per failed check.
    """

    def __init__(self, failures: list[tuple[str, str]]):
        self.failures = list(failures)
        lines = [f"{field}: {msg}" for field, msg in self.failures]
        super().__init__("invalid energy data -> " + "; ".join(lines))

    @property
    def fields(self) -> list[str]:
        return [field for field, _ in self.failures]


class ReferenceDataError(RuntimeError):
    """A reference table file is missing columns or holds unusable values."""
