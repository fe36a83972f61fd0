from typing import Optional


class ApiError(Exception):
    """Error that maps directly onto an error envelope and HTTP status"""

    code = "FETCH_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(ApiError):
    code = "NOT_FOUND"
    status_code = 404


class FetchError(ApiError):
    code = "FETCH_ERROR"
    status_code = 500


class DbError(ApiError):
    code = "DB_ERROR"
    status_code = 503


class GraphConfigurationError(RuntimeError):
    """Raised when the graph connection cannot be configured from the environment"""
