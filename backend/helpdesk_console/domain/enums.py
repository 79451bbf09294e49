"""Domain Enumerations - Rule builder types and states"""
from enum import Enum


class RuleType(str, Enum):
    """When an automation rule is evaluated by the helpdesk"""
    TICKET_CREATION = "ticket_creation"
    TICKET_UPDATE = "ticket_update"
    TIME_TRIGGER = "time_trigger"


class ConditionMatch(str, Enum):
    """How a rule's conditions are combined"""
    ALL = "all"
    ANY = "any"


class CustomFieldType(str, Enum):
    """Declared type of a tenant custom field"""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DECIMAL = "decimal"
    DROPDOWN = "dropdown"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    DATE = "date"


class CustomFieldEntityType(str, Enum):
    """Entity a custom field is attached to"""
    TICKET = "ticket"
    CONTACT = "contact"
    COMPANY = "company"


class ConditionOperator(str, Enum):
    """Operator keys offered by the rule builder"""
    IS = "is"
    IS_NOT = "is_not"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_BEFORE = "is_before"
    IS_AFTER = "is_after"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IS_SET = "is_set"
    IS_NOT_SET = "is_not_set"


class ValueEditorKind(str, Enum):
    """Input widget used for a condition/action value"""
    TEXT = "text"
    SELECT = "select"
    NUMBER = "number"
    DATE = "date"


class FormState(str, Enum):
    """Rule form lifecycle"""
    CLOSED = "closed"
    EDITING = "editing"
    SUBMITTING = "submitting"
