"""Error taxonomy shared by services and the HTTP layer."""


class NutriLensError(Exception):
    """Base error carrying a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Return a JSON-friendly error payload."""
        return {"type": type(self).__name__, "message": self.message}

    def __str__(self) -> str:
        return self.message


class InputValidationError(NutriLensError):
    """Raised for missing or invalid user input before any network call."""


class RequestInProgressError(InputValidationError):
    """Raised when a request is submitted while another is still in flight."""


class AnalysisError(NutriLensError):
    """Raised when the completion service fails or cannot be reached."""


class SchemaValidationError(AnalysisError):
    """Raised when the completion service output does not match the contract."""


class ProtectedEntityError(NutriLensError):
    """Raised when attempting to delete a protected default entity."""
