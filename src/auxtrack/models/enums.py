"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum

from auxtrack.core.errors import ValidationError


class AuxStatus(str, enum.Enum):
    """Declared work status of an AUX session."""

    READY = "ready"
    WORKING_ON_PROJECT = "working_on_project"
    PERSONAL = "personal"
    BREAK = "break"

    @classmethod
    def parse(cls, value: "str | AuxStatus") -> "AuxStatus":
        """Resolve a raw status string, rejecting anything outside the closed set.

        Matching is exact: no trimming, no case folding.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Unknown AUX status: {value!r}",
                details={"status": str(value), "allowed": [s.value for s in cls]},
            ) from None


# Statuses counted as productive time in reports
PRODUCTIVE_STATUSES = frozenset({AuxStatus.WORKING_ON_PROJECT})

# Statuses that count an employee as present on the admin dashboard
PRESENT_STATUSES = frozenset({AuxStatus.READY, AuxStatus.WORKING_ON_PROJECT})
