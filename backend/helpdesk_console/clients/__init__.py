"""External API clients"""
from .helpdesk_client import HelpdeskClient

__all__ = ["HelpdeskClient"]
