"""Content Delivery API client."""

from .pager import ContentfulPager

__all__ = ["ContentfulPager"]
