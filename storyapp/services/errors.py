"""
Error types raised by the Story API client and test steps.
"""


class StoryApiError(Exception):
    """Base exception for Story API client errors"""
    pass


class AuthenticationError(StoryApiError):
    """Raised when a bearer token cannot be obtained; fatal to the run"""
    pass


class ResponseFormatError(StoryApiError):
    """Raised when a response body is not the JSON shape expected"""

    def __init__(self, message: str, status_code: int = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StepAssertionError(AssertionError):
    """Raised when a step sees an unexpected status code or message"""
    pass
