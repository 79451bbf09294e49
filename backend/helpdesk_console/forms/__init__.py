"""Rule form state machine and validation"""
from .rule_form import RuleFormSession, RuleFormView, ConditionRowView, ActionRowView
from .validation import validate_draft, value_error

__all__ = [
    "RuleFormSession",
    "RuleFormView",
    "ConditionRowView",
    "ActionRowView",
    "validate_draft",
    "value_error",
]
