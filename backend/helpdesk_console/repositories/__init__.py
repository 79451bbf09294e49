"""Repositories - in-memory stores for transient console state"""
from .form_session_repo import FormSessionRepository

__all__ = ["FormSessionRepository"]
