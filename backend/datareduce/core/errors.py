"""
Error codes and the exception raised for invalid reduction parameters.

Malformed *data* never raises; only caller mistakes in options or field
configuration do.
"""
from typing import Dict, Optional

# Error codes
class ErrorCodes:
    INVALID_OPTIONS = "INVALID_OPTIONS"
    INVALID_X_KEY = "INVALID_X_KEY"
    INVALID_Y_KEY = "INVALID_Y_KEY"
    INVALID_HEADERS = "INVALID_HEADERS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    ErrorCodes.INVALID_OPTIONS: {
        "message": "Invalid reduction options",
        "detail": "One or more options are out of range or not a recognised value.",
        "suggestion": "Check max_rows / max_data_points are positive and that strategy, algorithm and grouping names are valid."
    },
    ErrorCodes.INVALID_X_KEY: {
        "message": "Invalid x-axis field",
        "detail": "The x-axis field name must be a non-empty string.",
        "suggestion": "Pass the name of the category or date field of each point."
    },
    ErrorCodes.INVALID_Y_KEY: {
        "message": "Invalid y-axis field",
        "detail": "At least one y-axis field name is required and every name must be a string.",
        "suggestion": "Pass a field name or a non-empty list of field names."
    },
    ErrorCodes.INVALID_HEADERS: {
        "message": "Invalid headers",
        "detail": "Headers must be a list of column names.",
        "suggestion": "Pass the column names in the same order as the cells of each row."
    },
    ErrorCodes.UNKNOWN_ERROR: {
        "message": "Unexpected reduction error",
        "detail": "The engine hit a condition it does not recognise.",
        "suggestion": "Check the inputs and try again."
    }
}


def get_error_response(error_code: str, additional_detail: Optional[str] = None) -> Dict[str, str]:
    """
    Get a structured error description for an error code.

    Args:
        error_code: One of the ErrorCodes constants
        additional_detail: Optional additional detail to append

    Returns:
        Dictionary with code, message, detail, and suggestion
    """
    error_info = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCodes.UNKNOWN_ERROR])

    response = {
        "code": error_code,
        "message": error_info["message"],
        "detail": error_info["detail"],
        "suggestion": error_info["suggestion"]
    }

    if additional_detail:
        response["detail"] = f"{response['detail']} {additional_detail}"

    return response


class ReductionError(ValueError):
    """Raised when a caller passes invalid reduction parameters."""

    def __init__(self, code: str, additional_detail: Optional[str] = None):
        self.code = code
        self.response = get_error_response(code, additional_detail)
        super().__init__(f"{self.response['message']}: {self.response['detail']}")
