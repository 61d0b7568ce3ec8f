"""Custom exceptions for the Contentful ingestion plugin."""


class ContentfulError(Exception):
    """Base exception for plugin errors."""

    def __init__(
        self, message: str, content_type: str | None = None, cause: Exception | None = None
    ):
        super().__init__(message)
        self.content_type = content_type
        self.cause = cause

    def __str__(self) -> str:
        msg = super().__str__()
        if self.content_type:
            msg = f"{msg} (Content type: {self.content_type})"
        if self.cause:
            msg = f"{msg} (Caused by: {self.cause})"
        return msg


class ValidationError(ContentfulError):
    """Exception raised when plugin options are missing or invalid."""

    pass


class FetchError(ContentfulError):
    """Exception raised when fetching entries from the API fails."""

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        cause: Exception | None = None,
        status: int | None = None,
    ):
        super().__init__(message, content_type=content_type, cause=cause)
        self.status = status


class TransformError(ContentfulError):
    """Exception raised when a user supplied transform fails."""

    pass


class TemplateError(ContentfulError):
    """Exception raised when rendering an entry through a template fails."""

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        cause: Exception | None = None,
        template: str | None = None,
    ):
        super().__init__(message, content_type=content_type, cause=cause)
        self.template = template

    def __str__(self) -> str:
        msg = super().__str__()
        if self.template:
            msg = f"{msg} (Template: {self.template})"
        return msg


class SaveError(ContentfulError):
    """Exception raised when writing a build artifact fails."""

    pass
