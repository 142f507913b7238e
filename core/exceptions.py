#!/usr/bin/env python3
"""
Matching Exceptions - Error taxonomy for the compatibility engine.

- ValidationError: malformed or missing required questionnaire answer
- PetDataError: listing cannot be addressed (no pet id)
- IncompleteDataWarning: listing is missing optional attributes (informational)
- StaleWriteDiscarded: cache write from an outdated profile version (logged only)
"""

from typing import Dict, Optional


class MatchingError(Exception):
    """Base exception for compatibility engine errors."""
    pass


class ValidationError(MatchingError):
    """Raised when questionnaire answers cannot be turned into a profile.

    Carries one message per offending field so the caller can show them
    next to the form inputs.
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            fields = ', '.join(sorted(self.errors))
            message = f"Invalid questionnaire answers: {fields}"
        super().__init__(message)


class PetDataError(MatchingError):
    """Raised when a pet listing has no usable identifier."""
    pass


class StaleWriteDiscarded(MatchingError):
    """A cache write was older than the adopter's current profile version."""

    def __init__(self, adopter_id: str, write_version: int, current_version: int):
        self.adopter_id = adopter_id
        self.write_version = write_version
        self.current_version = current_version
        super().__init__(
            f"Discarded stale write for adopter {adopter_id}: "
            f"version {write_version} < current {current_version}"
        )


class IncompleteDataWarning(UserWarning):
    """A pet listing is missing optional attributes; affected dimensions score as unknown."""
    pass
