"""
Custom exception hierarchy for the Water Softener Sizing MCP server.

All exceptions inherit from SofteningDesignError for easy catching of
sizing-specific errors.
"""
from typing import Any, Dict, List, Optional


class SofteningDesignError(Exception):
    """Base exception for all softener sizing errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        hint: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        parts = [self.message]
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"[{details_str}]")
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for MCP error responses."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.hint:
            result["hint"] = self.hint
        return result


# =============================================================================
# Sizing Exceptions
# =============================================================================

class InvalidInputError(SofteningDesignError):
    """A required sizing input is missing, non-numeric, zero or negative.

    This is the only failure of the sizing calculation; every other
    irregularity is reported as an unavailable field in the result.
    """

    kind = "InvalidInput"

    def __init__(
        self,
        invalid_fields: Dict[str, Any],
        hint: str = (
            "Please enter valid positive numbers for hardness, daily use, "
            "resin ft³, and capacity preset"
        )
    ):
        self.invalid_fields = dict(invalid_fields)
        super().__init__(
            message=f"Invalid sizing input: {', '.join(self.invalid_fields)}",
            details={
                "kind": self.kind,
                "invalid_fields": {k: repr(v) for k, v in self.invalid_fields.items()},
            },
            hint=hint
        )

    @property
    def field_names(self) -> List[str]:
        return list(self.invalid_fields)


# =============================================================================
# Catalog Exceptions
# =============================================================================

class UnknownTankError(SofteningDesignError):
    """Requested tank id is not in the catalog."""

    def __init__(self, tank_id: Any, catalog_size: int):
        super().__init__(
            message=f"Unknown tank: {tank_id!r}",
            details={"tank_id": repr(tank_id), "valid_ids": f"0-{catalog_size - 1}"},
            hint="Use list_softener_tanks to see available tanks"
        )
