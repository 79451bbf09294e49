"""Service layer"""
from .automation_service import AutomationService
from .query_cache import QueryCache

__all__ = ["AutomationService", "QueryCache"]
