"""API module - Routes and dependencies"""
from .deps import get_automation_service_dep, get_correlation_id_dep

__all__ = ["get_automation_service_dep", "get_correlation_id_dep"]
