"""Built-in rule builder catalogs

Static tables shared by every tenant. They are tuples so the vocabulary
builder can only extend copies of them.
"""
from typing import Dict, Tuple

from ..domain.enums import RuleType
from ..domain.models import Option


def _options(*pairs: Tuple[str, str]) -> Tuple[Option, ...]:
    return tuple(Option(value=value, label=label) for value, label in pairs)


# ============================================================================
# Rule types
# ============================================================================

RULE_TYPE_ORDER: Tuple[RuleType, ...] = (
    RuleType.TICKET_CREATION,
    RuleType.TICKET_UPDATE,
    RuleType.TIME_TRIGGER,
)

RULE_TYPE_LABELS: Dict[RuleType, Dict[str, str]] = {
    RuleType.TICKET_CREATION: {
        "label": "Ticket Creation",
        "description": "Runs when a new ticket is created",
    },
    RuleType.TICKET_UPDATE: {
        "label": "Ticket Updates",
        "description": "Runs when ticket properties change",
    },
    RuleType.TIME_TRIGGER: {
        "label": "Time Triggers",
        "description": "Runs hourly on matching tickets",
    },
}


# ============================================================================
# Triggers (event step)
# ============================================================================

BASE_TRIGGERS: Dict[RuleType, Tuple[Option, ...]] = {
    RuleType.TICKET_CREATION: _options(
        ("on_create", "When ticket is created"),
    ),
    RuleType.TICKET_UPDATE: _options(
        ("status_changed", "Status is changed"),
        ("priority_changed", "Priority is changed"),
        ("assignee_changed", "Assignee is changed"),
        ("reply_added", "Reply is added"),
        ("note_added", "Internal note is added"),
        ("tag_added", "Tag is added"),
        ("any_update", "Any property is updated"),
    ),
    RuleType.TIME_TRIGGER: _options(
        ("hourly", "Every hour"),
        ("every_2_hours", "Every 2 hours"),
        ("every_4_hours", "Every 4 hours"),
        ("daily", "Once daily"),
    ),
}


# ============================================================================
# Conditions
# ============================================================================

BASE_CONDITION_FIELDS: Tuple[Option, ...] = _options(
    ("status", "Status"),
    ("priority", "Priority"),
    ("category", "Category"),
    ("channel", "Channel"),
    ("tags", "Tags"),
    ("subject", "Subject"),
    ("description", "Description"),
    ("hours_since_created", "Hours since created"),
    ("hours_since_updated", "Hours since last update"),
    ("assignee", "Assignee"),
)

IS = ("is", "is")
IS_NOT = ("is_not", "is not")
CONTAINS = ("contains", "contains")
NOT_CONTAINS = ("not_contains", "does not contain")
STARTS_WITH = ("starts_with", "starts with")
GREATER_THAN = ("greater_than", "greater than")
LESS_THAN = ("less_than", "less than")
IS_BEFORE = ("is_before", "is before")
IS_AFTER = ("is_after", "is after")
IS_EMPTY = ("is_empty", "is empty")
IS_NOT_EMPTY = ("is_not_empty", "is not empty")
IS_SET = ("is_set", "is assigned")
IS_NOT_SET = ("is_not_set", "is not assigned")

BASE_CONDITION_OPERATORS: Dict[str, Tuple[Option, ...]] = {
    "status": _options(IS, IS_NOT),
    "priority": _options(IS, IS_NOT),
    "category": _options(IS, IS_NOT, CONTAINS),
    "channel": _options(IS, IS_NOT),
    "tags": _options(CONTAINS, NOT_CONTAINS),
    "subject": _options(CONTAINS, NOT_CONTAINS, STARTS_WITH),
    "description": _options(CONTAINS, NOT_CONTAINS),
    "hours_since_created": _options(GREATER_THAN, LESS_THAN),
    "hours_since_updated": _options(GREATER_THAN, LESS_THAN),
    "assignee": _options(IS_SET, IS_NOT_SET),
}


# ============================================================================
# Actions
# ============================================================================

BASE_ACTION_TYPES: Tuple[Option, ...] = _options(
    ("set_status", "Set status"),
    ("set_priority", "Set priority"),
    ("set_category", "Set category"),
    ("assign_to", "Assign to agent"),
    ("add_tag", "Add tag"),
    ("remove_tag", "Remove tag"),
    ("send_email", "Send email notification"),
    ("add_note", "Add internal note"),
)


# ============================================================================
# Built-in value choices
# ============================================================================

STATUS_OPTIONS = _options(
    ("open", "Open"),
    ("pending", "Pending"),
    ("in_progress", "In Progress"),
    ("resolved", "Resolved"),
    ("closed", "Closed"),
)

PRIORITY_OPTIONS = _options(
    ("low", "Low"),
    ("medium", "Medium"),
    ("high", "High"),
    ("urgent", "Urgent"),
)

CHANNEL_OPTIONS = _options(
    ("email", "Email"),
    ("phone", "Phone"),
    ("chat", "Chat"),
    ("portal", "Portal"),
    ("social", "Social"),
)

CATEGORY_OPTIONS = _options(
    ("general", "General"),
    ("billing", "Billing"),
    ("technical", "Technical"),
    ("sales", "Sales"),
    ("feedback", "Feedback"),
    ("feature_request", "Feature Request"),
    ("bug", "Bug"),
    ("account", "Account"),
)

CHECKBOX_OPTIONS = _options(
    ("true", "Checked"),
    ("false", "Unchecked"),
)


# Rows added by the form start from these keys
DEFAULT_CONDITION_FIELD = "status"
DEFAULT_CONDITION_OPERATOR = "is"
DEFAULT_ACTION_TYPE = "set_status"
