"""Client settings for talking to the Content Delivery API."""

from dataclasses import dataclass

from ..constants import CONSTANTS


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the API client and the run scheduler.

    All values default to the centralized constants.
    """

    # API endpoint
    host: str = CONSTANTS.DEFAULT_HOST
    environment: str = CONSTANTS.DEFAULT_ENVIRONMENT

    # HTTP Settings
    default_timeout: int = CONSTANTS.DEFAULT_TIMEOUT
    user_agent: str = CONSTANTS.DEFAULT_USER_AGENT

    # Paging and scheduling
    page_size: int = CONSTANTS.DEFAULT_PAGE_SIZE
    max_concurrent: int = CONSTANTS.MAX_CONCURRENT

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.host:
            raise ValueError("host cannot be empty")
        if not 1 <= self.page_size <= CONSTANTS.MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {CONSTANTS.MAX_PAGE_SIZE}")
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

    def entries_url(self, space_id: str) -> str:
        """Build the entries collection URL for a space."""
        return (
            f"{CONSTANTS.API_SCHEME}{self.host}/spaces/{space_id}"
            f"/environments/{self.environment}/entries"
        )


# Global config instance
config = ClientConfig()
