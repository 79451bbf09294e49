"""Domain Models - Pydantic schemas for rule builder entities"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import ConditionMatch, CustomFieldEntityType, RuleType, ValueEditorKind


CUSTOM_FIELD_PREFIX = "cf_"
CUSTOM_ACTION_PREFIX = "set_cf_"


def _as_text(value: Any) -> Any:
    """Stored rows are untyped JSON; scalar values are read back as strings"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class WireModel(BaseModel):
    """Base for models exchanged with the helpdesk API (camelCase JSON)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


# ============================================================================
# Custom Fields
# ============================================================================

class CustomFieldDefinition(WireModel):
    """Tenant-defined field attached to tickets, contacts or companies"""

    id: str = Field(..., description="Custom field ID")
    entity_type: CustomFieldEntityType = Field(default=CustomFieldEntityType.TICKET)
    name: str = Field(default="", description="Machine name")
    label: str = Field(..., description="Display label")
    # Kept as a plain string so unknown types degrade instead of failing to parse
    field_type: str = Field(..., description="text, textarea, number, decimal, dropdown, multiselect, checkbox, date")
    options: List[str] = Field(default_factory=list, description="Choices for dropdown/multiselect")
    is_required: bool = False
    is_active: bool = True
    is_archived: bool = False
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    position: int = 0

    @field_validator("options", mode="before")
    @classmethod
    def _none_options(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def condition_key(self) -> str:
        return f"{CUSTOM_FIELD_PREFIX}{self.id}"

    @property
    def action_key(self) -> str:
        return f"{CUSTOM_ACTION_PREFIX}{self.id}"

    @property
    def trigger_key(self) -> str:
        return f"{CUSTOM_FIELD_PREFIX}{self.id}_changed"

    @property
    def is_selectable(self) -> bool:
        """Only active, non-archived fields take part in the vocabulary"""
        return self.is_active and not self.is_archived


# ============================================================================
# Conditions & Actions
# ============================================================================

class Condition(WireModel):
    """Single rule condition: <field> <operator> <value>"""

    field: str = Field(..., description="Built-in field key or cf_<id>")
    operator: str = Field(..., description="Operator key valid for the field")
    value: str = Field(default="", description="Empty for presence operators")

    @field_validator("value", mode="before")
    @classmethod
    def _text_value(cls, value: Any) -> Any:
        return _as_text(value)


class Action(WireModel):
    """Single rule action: <type> <value>"""

    type: str = Field(..., description="Built-in action key or set_cf_<id>")
    value: str = Field(default="")

    @field_validator("value", mode="before")
    @classmethod
    def _text_value(cls, value: Any) -> Any:
        return _as_text(value)


# ============================================================================
# Automation Rules
# ============================================================================

class AutomationRule(WireModel):
    """Persisted automation rule as returned by the helpdesk API"""

    id: str
    name: str
    description: Optional[str] = None
    # Left as a string: unknown/missing types are grouped leniently on read
    rule_type: Optional[str] = None
    trigger: str = ""
    condition_match: str = ConditionMatch.ALL.value
    conditions: List[Condition] = Field(default_factory=list)
    actions: List[Action] = Field(default_factory=list)
    is_active: bool = True
    order: int = 0
    execution_count: int = Field(default=0, ge=0)
    last_executed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("conditions", "actions", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("execution_count", mode="before")
    @classmethod
    def _none_count(cls, value: Any) -> Any:
        return 0 if value is None else value


class RuleDraft(WireModel):
    """In-memory rule being authored in a form session"""

    name: str = ""
    description: str = ""
    rule_type: RuleType = RuleType.TICKET_CREATION
    trigger: str = ""
    condition_match: ConditionMatch = ConditionMatch.ALL
    conditions: List[Condition] = Field(default_factory=list)
    actions: List[Action] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST /api/automation-rules"""
        payload = self.model_dump(mode="json", by_alias=True)
        if not self.description.strip():
            payload.pop("description")
        return payload


# ============================================================================
# Vocabulary building blocks
# ============================================================================

class Option(BaseModel):
    """Selectable (value, label) pair"""
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class ValueEditor(BaseModel):
    """Editor resolved for a condition/action value"""
    model_config = ConfigDict(frozen=True)

    kind: ValueEditorKind = ValueEditorKind.TEXT
    options: Tuple[Option, ...] = ()
    placeholder: Optional[str] = None
    step: Optional[str] = None
