"""
Journal Progress Engine - Exceptions
Error types raised by the progress engine and its collaborators.
"""

from typing import Optional, Dict, Any, List


class ProgressError(Exception):
    """Base exception for progress engine errors."""

    def __init__(
        self,
        message: str,
        code: str = "PROGRESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for the calling screen."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidSaveError(ProgressError, ValueError):
    """Raised when daily save input fails validation. The ledger is untouched."""

    def __init__(
        self,
        message: str = "Invalid daily save input",
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_SAVE",
            details={"errors": errors or []}
        )

    @property
    def fields(self) -> List[str]:
        """Names of the offending input fields."""
        names = []
        for error in self.details.get("errors", []):
            loc = error.get("loc") or ()
            if loc:
                names.append(str(loc[0]))
        return names


class UnknownAchievementError(ProgressError, KeyError):
    """Raised when an achievement id is not in the catalog."""

    def __init__(self, achievement_id: str):
        super().__init__(
            message=f"Achievement not found: {achievement_id}",
            code="UNKNOWN_ACHIEVEMENT",
            details={"achievement_id": achievement_id}
        )

    def __str__(self) -> str:
        return self.message


class CatalogError(ProgressError):
    """Raised when the achievement catalog itself is malformed."""

    def __init__(self, message: str, achievement_id: Optional[str] = None):
        super().__init__(
            message=message,
            code="CATALOG_ERROR",
            details={"achievement_id": achievement_id} if achievement_id else {}
        )


class LedgerStoreError(ProgressError):
    """Raised when a persisted ledger cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=message,
            code="LEDGER_STORE_ERROR",
            details={"path": path} if path else {}
        )
