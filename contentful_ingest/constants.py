"""Centralized constants for the Contentful ingestion plugin.

Everything tunable is read from the environment here so that business logic
never carries hardcoded values.
"""

from os import environ

# Content Delivery API
DEFAULT_HOST: str = environ.get("CONTENTFUL_HOST", "cdn.contentful.com")
PREVIEW_HOST: str = "preview.contentful.com"
DEFAULT_ENVIRONMENT: str = environ.get("CONTENTFUL_ENVIRONMENT", "master")
API_SCHEME: str = "https://"

# Paging - the API rejects limits above 1000
DEFAULT_PAGE_SIZE: int = int(environ.get("CONTENTFUL_PAGE_SIZE", "100"))
MAX_PAGE_SIZE: int = 1000
MAX_INCLUDE_LEVEL: int = 10

# HTTP Configuration
DEFAULT_TIMEOUT: int = int(environ.get("CONTENTFUL_TIMEOUT", "30"))
MAX_CONCURRENT: int = int(environ.get("CONTENTFUL_MAX_CONCURRENT", "4"))
DEFAULT_USER_AGENT: str = environ.get("CONTENTFUL_USER_AGENT", "contentful-ingest/1.0")

# HTTP Status codes
HTTP_STATUS_UNAUTHORIZED: int = 401
HTTP_STATUS_NOT_FOUND: int = 404
HTTP_STATUS_SERVER_ERROR: int = 500

# Credentials read by the config loader when an option file omits them
ENV_ACCESS_TOKEN: str = "CONTENTFUL_ACCESS_TOKEN"  # noqa: S105
ENV_SPACE_ID: str = "CONTENTFUL_SPACE_ID"

# Build data
DATA_KEY: str = "contentful"
TEMPLATE_ITEM_NAME: str = "item"
DEFAULT_OUTPUT_DIR: str = environ.get("OUTPUT_DIR", "public")
DEFAULT_ENCODING: str = "utf-8"
JSON_INDENT: int = 2

# Error message prefix used by constructor validation
VALIDATION_PREFIX: str = "[contentful plugin]"

# Logging Configuration
LOG_LEVEL: str = environ.get("LOG_LEVEL", "INFO")

# Exit codes
EXIT_CODE_ERROR: int = 1
EXIT_CODE_KEYBOARD_INTERRUPT: int = 130


class AppConstants:  # pylint: disable=too-few-public-methods
    """Attribute access to the module level constants."""

    def __getattr__(self, name: str):
        """Redirect to module level constants."""
        import sys  # pylint: disable=import-outside-toplevel

        return getattr(sys.modules[__name__], name)


CONSTANTS = AppConstants()
