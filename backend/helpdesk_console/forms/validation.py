"""Rule draft validation - runs before any network call"""
import math
from typing import Dict, Optional

from ..domain.enums import ValueEditorKind
from ..domain.models import RuleDraft, ValueEditor
from ..utils.time import try_parse_iso
from ..vocabulary import Vocabulary, operators_for, value_editor_for

NAME_MIN_LENGTH = 2


def value_error(editor: Optional[ValueEditor], value: str) -> Optional[str]:
    """
    Check a row value against its resolved editor

    Values are optional; only non-empty values are checked. Rows without an
    editor (presence operators) never fail.
    """
    if editor is None or not value.strip():
        return None

    if editor.kind == ValueEditorKind.SELECT:
        if value not in {option.value for option in editor.options}:
            return "Choose one of the listed values"
    elif editor.kind == ValueEditorKind.NUMBER:
        try:
            number = float(value)
        except ValueError:
            return "Enter a number"
        if not math.isfinite(number):
            return "Enter a number"
    elif editor.kind == ValueEditorKind.DATE:
        if try_parse_iso(value) is None:
            return "Enter a date (YYYY-MM-DD)"
    return None


def validate_draft(draft: RuleDraft, vocabulary: Vocabulary) -> Dict[str, str]:
    """
    Validate a rule draft against the current vocabulary

    Args:
        draft: Rule being authored
        vocabulary: Merged vocabulary the form was rendered from

    Returns:
        Field key -> message. Empty when the draft can be submitted.
    """
    errors: Dict[str, str] = {}

    if len(draft.name) < NAME_MIN_LENGTH:
        errors["name"] = f"Name must be at least {NAME_MIN_LENGTH} characters"

    if not vocabulary.has_trigger(draft.rule_type, draft.trigger):
        errors["trigger"] = "Select a trigger event for this rule type"

    for index, condition in enumerate(draft.conditions):
        prefix = f"conditions.{index}"
        if not vocabulary.has_condition_field(condition.field):
            errors[f"{prefix}.field"] = f"Unknown field '{condition.field}'"
            continue
        valid_operators = {option.value for option in operators_for(condition.field, vocabulary)}
        if condition.operator not in valid_operators:
            errors[f"{prefix}.operator"] = f"Operator '{condition.operator}' is not available for this field"
            continue
        message = value_error(
            value_editor_for(condition.field, vocabulary, condition.operator),
            condition.value,
        )
        if message:
            errors[f"{prefix}.value"] = message

    # Structural rule: the list itself must be non-empty
    if not draft.actions:
        errors["actions"] = "At least one action is required"

    for index, action in enumerate(draft.actions):
        prefix = f"actions.{index}"
        if not vocabulary.has_action_type(action.type):
            errors[f"{prefix}.type"] = f"Unknown action '{action.type}'"
            continue
        message = value_error(value_editor_for(action.type, vocabulary), action.value)
        if message:
            errors[f"{prefix}.value"] = message

    return errors
