"""
Exceptions for inference client communication.
"""


class LLMClientError(Exception):
    """Base exception for inference client errors."""
    pass


class LLMConnectionError(LLMClientError):
    """Exception raised when unable to connect to the inference server."""
    pass


class LLMServerError(LLMClientError):
    """Exception raised when the inference server returns an error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class LLMTimeoutError(LLMClientError):
    """Exception raised when an inference request times out."""
    pass


class LLMResponseError(LLMClientError):
    """Exception raised when the server answers with an unexpected payload."""
    pass
