"""
Error taxonomy for enclosure design.

Every condition here is recoverable: the caller reports it and lets the
user retry with corrected input.
"""

from typing import List, Optional


class EnclosureDesignError(ValueError):
    """Base class for all enclosure design failures."""


class MissingInputError(EnclosureDesignError):
    """One or more required parameters are absent or not numeric."""

    def __init__(self, missing: List[str], message: Optional[str] = None):
        self.missing = list(missing)
        if message is None:
            message = f"Missing required parameters: {', '.join(self.missing)}"
        super().__init__(message)


class InfeasibleDesignError(EnclosureDesignError):
    """The driver parameters cannot produce a physical enclosure."""


class NonPositiveGeometryError(EnclosureDesignError):
    """A panel or cutout dimension is zero, negative or not finite."""
