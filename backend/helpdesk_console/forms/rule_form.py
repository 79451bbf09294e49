"""Rule Form Session - event/condition/action editor as a state machine

    CLOSED --open()--> EDITING --begin_submit()--> SUBMITTING
    SUBMITTING --complete_submit()--> CLOSED (draft reset)
    SUBMITTING --fail_submit()--> EDITING (draft kept)
    EDITING --close()--> CLOSED (draft discarded, no server call)

A session owns exactly one draft. Row operators and editors are resolved
from the vocabulary on every read; rows hold no derived state.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field

from ..domain.enums import ConditionMatch, FormState, RuleType
from ..domain.errors import (
    InvalidStateError, RowNotFoundError, RuleValidationError,
    ValidationError, VocabularySelectionError,
)
from ..domain.models import Action, AutomationRule, Condition, Option, RuleDraft, ValueEditor
from ..utils.idgen import generate_form_session_id
from ..utils.logger import get_logger
from ..utils.time import utc_now
from ..vocabulary import Vocabulary, is_presence_operator, operators_for, value_editor_for
from ..vocabulary.catalogs import (
    DEFAULT_ACTION_TYPE, DEFAULT_CONDITION_FIELD, DEFAULT_CONDITION_OPERATOR, RULE_TYPE_LABELS,
)
from .validation import validate_draft

logger = get_logger(__name__)


# ============================================================================
# Views
# ============================================================================

class ConditionRowView(BaseModel):
    """Condition row with its resolved operator list and editor"""
    index: int
    field: str
    operator: str
    value: str
    operators: Tuple[Option, ...]
    editor: Optional[ValueEditor] = None


class ActionRowView(BaseModel):
    """Action row with its resolved editor"""
    index: int
    type: str
    value: str
    editor: Optional[ValueEditor] = None


class RuleFormView(BaseModel):
    """Everything needed to render the rule form"""
    session_id: str
    state: FormState
    title: Optional[str] = None
    description: Optional[str] = None
    draft: Optional[RuleDraft] = None
    triggers: Tuple[Option, ...] = ()
    condition_fields: Tuple[Option, ...] = ()
    action_types: Tuple[Option, ...] = ()
    conditions: List[ConditionRowView] = Field(default_factory=list)
    actions: List[ActionRowView] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)
    last_error: Optional[str] = None
    created_rule: Optional[AutomationRule] = None


# ============================================================================
# Session
# ============================================================================

class RuleFormSession:
    """Single rule draft and its lifecycle"""

    def __init__(self, vocabulary: Vocabulary, session_id: Optional[str] = None):
        self.session_id = session_id or generate_form_session_id()
        self.state = FormState.CLOSED
        self.draft: Optional[RuleDraft] = None
        self.errors: Dict[str, str] = {}
        self.last_error: Optional[str] = None
        self.created_rule: Optional[AutomationRule] = None
        self.updated_at: datetime = utc_now()
        self._vocabulary = vocabulary
        self._submit_attempted = False

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self, rule_type: RuleType = RuleType.TICKET_CREATION) -> None:
        """Start a fresh draft for the given rule type"""
        if self.state == FormState.SUBMITTING:
            raise InvalidStateError("A submission is in flight")

        self.draft = RuleDraft(
            rule_type=rule_type,
            trigger=self._first_trigger(rule_type),
            condition_match=ConditionMatch.ALL,
            conditions=[],
            actions=[Action(type=DEFAULT_ACTION_TYPE, value="")],
        )
        self.state = FormState.EDITING
        self.errors = {}
        self.last_error = None
        self.created_rule = None
        self._submit_attempted = False
        self._touch()
        logger.info(
            f"Opened rule form {self.session_id}",
            extra={"session_id": self.session_id, "rule_type": rule_type.value}
        )

    def close(self) -> None:
        """Discard the draft; nothing is sent to the server"""
        if self.state == FormState.SUBMITTING:
            raise InvalidStateError("A submission in flight cannot be cancelled")
        self._reset()
        logger.info(f"Closed rule form {self.session_id}", extra={"session_id": self.session_id})

    def refresh_vocabulary(self, vocabulary: Vocabulary) -> None:
        """Swap in a recomputed vocabulary (custom fields changed)"""
        self._vocabulary = vocabulary
        self._revalidate()

    # =========================================================================
    # Rule-level fields
    # =========================================================================

    def set_rule_type(self, rule_type: RuleType) -> None:
        """Change rule type; the trigger resets to that type's first entry"""
        draft = self._editable_draft()
        draft.rule_type = rule_type
        draft.trigger = self._first_trigger(rule_type)
        self._revalidate()

    def set_details(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        trigger: Optional[str] = None,
        condition_match: Optional[ConditionMatch] = None,
    ) -> None:
        """Update any of the rule-level inputs"""
        draft = self._editable_draft()
        if trigger is not None and not self._vocabulary.has_trigger(draft.rule_type, trigger):
            raise VocabularySelectionError(
                f"Trigger '{trigger}' is not available for {draft.rule_type.value} rules",
                details={"trigger": trigger}
            )
        if name is not None:
            draft.name = name
        if description is not None:
            draft.description = description
        if trigger is not None:
            draft.trigger = trigger
        if condition_match is not None:
            draft.condition_match = condition_match
        self._revalidate()

    # =========================================================================
    # Condition rows
    # =========================================================================

    def add_condition(self) -> int:
        draft = self._editable_draft()
        draft.conditions.append(Condition(
            field=DEFAULT_CONDITION_FIELD,
            operator=DEFAULT_CONDITION_OPERATOR,
            value="",
        ))
        self._revalidate()
        return len(draft.conditions) - 1

    def remove_condition(self, index: int) -> None:
        draft = self._editable_draft()
        self._check_index(draft.conditions, index, "condition")
        del draft.conditions[index]
        self._revalidate()

    def edit_condition(
        self,
        index: int,
        field: Optional[str] = None,
        operator: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        """
        Apply a row edit in field -> operator -> value order

        The whole edit is checked before the row is replaced, so a rejected
        part leaves the row as it was.
        """
        draft = self._editable_draft()
        self._check_index(draft.conditions, index, "condition")
        draft.conditions[index] = self._edited_condition(draft.conditions[index], index, field, operator, value)
        self._revalidate()

    def set_condition_field(self, index: int, field: str) -> None:
        """Pick a field; the operator resets to the field's first operator"""
        self.edit_condition(index, field=field)

    def set_condition_operator(self, index: int, operator: str) -> None:
        self.edit_condition(index, operator=operator)

    def set_condition_value(self, index: int, value: str) -> None:
        self.edit_condition(index, value=value)

    # =========================================================================
    # Action rows
    # =========================================================================

    def add_action(self) -> int:
        draft = self._editable_draft()
        draft.actions.append(Action(type=DEFAULT_ACTION_TYPE, value=""))
        self._revalidate()
        return len(draft.actions) - 1

    def remove_action(self, index: int) -> None:
        draft = self._editable_draft()
        self._check_index(draft.actions, index, "action")
        del draft.actions[index]
        self._revalidate()

    def edit_action(self, index: int, action_type: Optional[str] = None, value: Optional[str] = None) -> None:
        """Apply a row edit in type -> value order; a rejected edit changes nothing"""
        draft = self._editable_draft()
        self._check_index(draft.actions, index, "action")
        row = draft.actions[index]
        if action_type is not None:
            if not self._vocabulary.has_action_type(action_type):
                raise VocabularySelectionError(
                    f"Action '{action_type}' is not available",
                    details={"type": action_type}
                )
            row = Action(type=action_type, value="")
        if value is not None:
            row = Action(type=row.type, value=value)
        draft.actions[index] = row
        self._revalidate()

    def set_action_type(self, index: int, action_type: str) -> None:
        self.edit_action(index, action_type=action_type)

    def set_action_value(self, index: int, value: str) -> None:
        self.edit_action(index, value=value)

    # =========================================================================
    # Submission
    # =========================================================================

    def validate(self) -> Dict[str, str]:
        draft = self._editable_draft()
        self.errors = validate_draft(draft, self._vocabulary)
        return self.errors

    def begin_submit(self) -> Dict[str, Any]:
        """
        Validate and enter SUBMITTING

        Returns:
            Request body for the create call

        Raises:
            RuleValidationError: draft is invalid; state stays EDITING
        """
        self._submit_attempted = True
        errors = self.validate()
        if errors:
            logger.info(
                f"Rule form {self.session_id} failed validation: {sorted(errors)}",
                extra={"session_id": self.session_id}
            )
            raise RuleValidationError(errors)

        self.state = FormState.SUBMITTING
        self.last_error = None
        self._touch()
        return self._payload()

    def complete_submit(self, rule: AutomationRule) -> None:
        """Server accepted the rule: reset the form and close"""
        self._require_state(FormState.SUBMITTING)
        self._reset()
        self.created_rule = rule
        logger.info(
            f"Rule form {self.session_id} created rule {rule.id}",
            extra={"session_id": self.session_id, "rule_id": rule.id}
        )

    def fail_submit(self, message: str) -> None:
        """Server call failed: back to EDITING with the draft intact"""
        self._require_state(FormState.SUBMITTING)
        self.state = FormState.EDITING
        self.last_error = message
        self._touch()
        logger.warning(
            f"Rule form {self.session_id} submission failed: {message}",
            extra={"session_id": self.session_id}
        )

    # =========================================================================
    # Rendering
    # =========================================================================

    def condition_rows(self) -> List[ConditionRowView]:
        if self.draft is None:
            return []
        return [
            ConditionRowView(
                index=index,
                field=row.field,
                operator=row.operator,
                value=row.value,
                operators=operators_for(row.field, self._vocabulary),
                editor=value_editor_for(row.field, self._vocabulary, row.operator),
            )
            for index, row in enumerate(self.draft.conditions)
        ]

    def action_rows(self) -> List[ActionRowView]:
        if self.draft is None:
            return []
        return [
            ActionRowView(
                index=index,
                type=row.type,
                value=row.value,
                editor=value_editor_for(row.type, self._vocabulary),
            )
            for index, row in enumerate(self.draft.actions)
        ]

    def view(self) -> RuleFormView:
        labels = RULE_TYPE_LABELS.get(self.draft.rule_type, {}) if self.draft else {}
        return RuleFormView(
            session_id=self.session_id,
            state=self.state,
            title=f"Create {labels['label']} Rule" if labels else None,
            description=labels.get("description"),
            draft=self.draft.model_copy(deep=True) if self.draft else None,
            triggers=self._vocabulary.triggers_for(self.draft.rule_type) if self.draft else (),
            condition_fields=self._vocabulary.condition_fields,
            action_types=self._vocabulary.action_types,
            conditions=self.condition_rows(),
            actions=self.action_rows(),
            errors=dict(self.errors),
            last_error=self.last_error,
            created_rule=self.created_rule,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _payload(self) -> Dict[str, Any]:
        draft = self.draft.model_copy(deep=True)
        # Presence checks never carry a value
        draft.conditions = [
            Condition(field=c.field, operator=c.operator, value="") if is_presence_operator(c.operator) else c
            for c in draft.conditions
        ]
        return draft.to_payload()

    def _edited_condition(
        self,
        row: Condition,
        index: int,
        field: Optional[str],
        operator: Optional[str],
        value: Optional[str],
    ) -> Condition:
        if field is not None:
            if not self._vocabulary.has_condition_field(field):
                raise VocabularySelectionError(f"Field '{field}' is not available", details={"field": field})
            row = Condition(field=field, operator=operators_for(field, self._vocabulary)[0].value, value="")

        if operator is not None:
            valid = {option.value for option in operators_for(row.field, self._vocabulary)}
            if operator not in valid:
                raise VocabularySelectionError(
                    f"Operator '{operator}' is not available for field '{row.field}'",
                    details={"field": row.field, "operator": operator}
                )
            row = Condition(
                field=row.field,
                operator=operator,
                value="" if is_presence_operator(operator) else row.value,
            )

        if value is not None:
            if is_presence_operator(row.operator):
                raise ValidationError(
                    f"Operator '{row.operator}' takes no value",
                    details={"index": index, "operator": row.operator}
                )
            row = Condition(field=row.field, operator=row.operator, value=value)
        return row

    def _first_trigger(self, rule_type: RuleType) -> str:
        triggers = self._vocabulary.triggers_for(rule_type)
        return triggers[0].value if triggers else ""

    def _editable_draft(self) -> RuleDraft:
        self._require_state(FormState.EDITING)
        self._touch()
        return self.draft

    def _require_state(self, expected: FormState) -> None:
        if self.state != expected:
            raise InvalidStateError(
                f"Form is {self.state.value}, expected {expected.value}",
                details={"state": self.state.value}
            )

    def _revalidate(self) -> None:
        # Errors are only shown after the first submit attempt
        if self._submit_attempted and self.state == FormState.EDITING:
            self.errors = validate_draft(self.draft, self._vocabulary)

    def _reset(self) -> None:
        self.state = FormState.CLOSED
        self.draft = None
        self.errors = {}
        self.last_error = None
        self._submit_attempted = False
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utc_now()

    @staticmethod
    def _check_index(rows: list, index: int, kind: str) -> None:
        if index < 0 or index >= len(rows):
            raise RowNotFoundError(f"No {kind} at position {index}", details={"index": index})
