from typing import Optional


class ResumeValidationError(ValueError):
    """
    Raised when a request is missing required fields or carries malformed ones.
    """

    def __init__(self, message: str = "Invalid request data"):
        super().__init__(message)
        self.message = message


class UnsupportedFormatError(ResumeValidationError):
    """
    Raised when an upload's MIME type is not on the PDF/DOCX allowlist.
    """

    def __init__(self, content_type: Optional[str] = None, message: Optional[str] = None):
        if not message:
            message = "Invalid file type. Only PDF and DOCX files are allowed."
        super().__init__(message)
        self.content_type = content_type


class FileTooLargeError(ResumeValidationError):
    """
    Raised when an upload exceeds the configured size ceiling.
    """

    def __init__(self, max_bytes: int, size: Optional[int] = None):
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(f"File too large. Maximum size is {max_mb:g}MB.")
        self.max_bytes = max_bytes
        self.size = size


class ExtractionFailedError(ResumeValidationError):
    """
    Raised when no extraction strategy produced enough readable text.
    """

    def __init__(self, extracted_length: int = 0, message: Optional[str] = None):
        if not message:
            message = (
                "Could not extract sufficient text from the resume. Please ensure the file "
                "contains readable text and is not image-based, then upload it again."
            )
        super().__init__(message)
        self.extracted_length = extracted_length


class RateLimitedError(Exception):
    """
    Raised when a client exceeds its request budget for the current window.
    """

    def __init__(self, retry_after: int, message: Optional[str] = None):
        self.retry_after = retry_after
        self.message = message or "Too many requests from this IP, please try again later."
        super().__init__(self.message)


class EmailDeliveryError(Exception):
    """
    Raised when the email provider rejects or fails to accept a message.

    Attributes:
        recipient: Address the essay was meant for.
        original_error: Provider error text, kept for logs only.
    """

    def __init__(
        self,
        recipient: Optional[str] = None,
        original_error: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.recipient = recipient
        self.original_error = original_error
        if not message:
            message = "Failed to send email"
            if original_error:
                message = f"{message}: {original_error}"
        self.message = message
        super().__init__(message)
