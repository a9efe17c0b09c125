from .client import ApiClient, ApiResponse, CommandExecutor
from .errors import ApiError
from .suggestions import suggest

__all__ = ["ApiClient", "ApiResponse", "CommandExecutor", "ApiError", "suggest"]
