"""Exceptions raised by the logbook scanning pipeline."""


class ExtractionError(Exception):
    """Terminal failure extracting one page: call failure or unusable response."""

    def __init__(self, message, status_code=None, original_error=None):
        """
        Initialize the error.

        Args:
            message: Error message
            status_code: HTTP status code, when the API responded
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error

    def __str__(self):
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message
