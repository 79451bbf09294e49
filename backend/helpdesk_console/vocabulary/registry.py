"""Vocabulary Registry - operators and value editors per field type

Pure functions: nothing here keeps state, and unknown field types or keys
fall back to a minimal operator set and a generic text editor instead of
raising.
"""
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple

from ..domain.enums import ConditionOperator, CustomFieldType, ValueEditorKind
from ..domain.models import Option, ValueEditor
from .catalogs import (
    IS, IS_NOT, CONTAINS, NOT_CONTAINS, GREATER_THAN, LESS_THAN,
    IS_BEFORE, IS_AFTER, IS_EMPTY, IS_NOT_EMPTY,
    STATUS_OPTIONS, PRIORITY_OPTIONS, CHANNEL_OPTIONS, CATEGORY_OPTIONS,
    CHECKBOX_OPTIONS,
)

if TYPE_CHECKING:
    from .builder import Vocabulary


PRESENCE_OPERATORS = frozenset({
    ConditionOperator.IS_EMPTY.value,
    ConditionOperator.IS_NOT_EMPTY.value,
    ConditionOperator.IS_SET.value,
    ConditionOperator.IS_NOT_SET.value,
})


def _dedupe(pairs: Iterable[Tuple[str, str]]) -> Tuple[Option, ...]:
    """Build options keeping the first occurrence of each value"""
    seen = set()
    options = []
    for value, label in pairs:
        if value in seen:
            continue
        seen.add(value)
        options.append(Option(value=value, label=label))
    return tuple(options)


_TEXT_OPERATORS = _dedupe((IS, IS_NOT, CONTAINS, NOT_CONTAINS, IS_EMPTY, IS_NOT_EMPTY))
_NUMERIC_OPERATORS = _dedupe((IS, IS_NOT, GREATER_THAN, LESS_THAN, IS_EMPTY, IS_NOT_EMPTY))
_CHOICE_OPERATORS = _dedupe((IS, IS_NOT, CONTAINS, IS_EMPTY, IS_NOT_EMPTY))
_CHECKBOX_OPERATORS = _dedupe((IS,))
_DATE_OPERATORS = _dedupe((IS, IS_BEFORE, IS_AFTER, IS_EMPTY, IS_NOT_EMPTY))

FALLBACK_OPERATORS = _dedupe((IS, IS_NOT))

OPERATORS_BY_FIELD_TYPE: Dict[str, Tuple[Option, ...]] = {
    CustomFieldType.TEXT.value: _TEXT_OPERATORS,
    CustomFieldType.TEXTAREA.value: _TEXT_OPERATORS,
    CustomFieldType.NUMBER.value: _NUMERIC_OPERATORS,
    CustomFieldType.DECIMAL.value: _NUMERIC_OPERATORS,
    CustomFieldType.DROPDOWN.value: _CHOICE_OPERATORS,
    CustomFieldType.MULTISELECT.value: _CHOICE_OPERATORS,
    CustomFieldType.CHECKBOX.value: _CHECKBOX_OPERATORS,
    CustomFieldType.DATE.value: _DATE_OPERATORS,
}


def operators_for_field_type(field_type: Optional[str]) -> Tuple[Option, ...]:
    """Ordered operators for a custom field type; {is, is_not} when unknown"""
    return OPERATORS_BY_FIELD_TYPE.get(field_type or "", FALLBACK_OPERATORS)


def is_presence_operator(operator: Optional[str]) -> bool:
    """Presence checks take no value, so no editor is rendered for them"""
    return operator in PRESENCE_OPERATORS


# ============================================================================
# Value editors
# ============================================================================

GENERIC_EDITOR = ValueEditor(kind=ValueEditorKind.TEXT, placeholder="Value")

_BUILTIN_EDITORS: Dict[str, ValueEditor] = {
    "status": ValueEditor(kind=ValueEditorKind.SELECT, options=STATUS_OPTIONS, placeholder="Select status"),
    "priority": ValueEditor(kind=ValueEditorKind.SELECT, options=PRIORITY_OPTIONS, placeholder="Select priority"),
    "channel": ValueEditor(kind=ValueEditorKind.SELECT, options=CHANNEL_OPTIONS, placeholder="Select channel"),
    "category": ValueEditor(kind=ValueEditorKind.SELECT, options=CATEGORY_OPTIONS, placeholder="Select category"),
    "assign_to": ValueEditor(kind=ValueEditorKind.TEXT, placeholder="Agent email or ID"),
    "tags": ValueEditor(kind=ValueEditorKind.TEXT, placeholder="Tag name"),
    "send_email": ValueEditor(kind=ValueEditorKind.TEXT, placeholder="Email template or recipient"),
    "add_note": ValueEditor(kind=ValueEditorKind.TEXT, placeholder="Note content"),
}

# Action keys sharing a condition field's editor
_BUILTIN_ALIASES = {
    "set_status": "status",
    "set_priority": "priority",
    "set_category": "category",
    "add_tag": "tags",
    "remove_tag": "tags",
}


def _custom_field_editor(field_type: str, options: Tuple[str, ...], placeholder: Optional[str]) -> ValueEditor:
    if field_type in (CustomFieldType.DROPDOWN.value, CustomFieldType.MULTISELECT.value):
        return ValueEditor(
            kind=ValueEditorKind.SELECT,
            options=tuple(Option(value=opt, label=opt) for opt in options),
            placeholder="Select value",
        )
    if field_type == CustomFieldType.CHECKBOX.value:
        return ValueEditor(kind=ValueEditorKind.SELECT, options=CHECKBOX_OPTIONS, placeholder="Select value")
    if field_type in (CustomFieldType.NUMBER.value, CustomFieldType.DECIMAL.value):
        return ValueEditor(
            kind=ValueEditorKind.NUMBER,
            placeholder=placeholder or "Enter number",
            step="0.01" if field_type == CustomFieldType.DECIMAL.value else "1",
        )
    if field_type == CustomFieldType.DATE.value:
        return ValueEditor(kind=ValueEditorKind.DATE)
    return ValueEditor(kind=ValueEditorKind.TEXT, placeholder=placeholder or "Value")


def value_editor_for(
    key: str,
    vocabulary: Optional["Vocabulary"] = None,
    operator: Optional[str] = None,
) -> Optional[ValueEditor]:
    """
    Resolve the value editor for a condition field or action type

    Args:
        key: Condition field key (``status``, ``cf_<id>``) or action
            type key (``set_status``, ``set_cf_<id>``)
        vocabulary: Merged vocabulary used to look up custom fields
        operator: Selected operator for condition rows

    Returns:
        The editor to render, or None when the operator is a presence check
    """
    if is_presence_operator(operator):
        return None

    custom_field = vocabulary.custom_field_for(key) if vocabulary is not None else None
    if custom_field is not None:
        return _custom_field_editor(
            custom_field.field_type,
            tuple(custom_field.options),
            custom_field.placeholder,
        )

    builtin = _BUILTIN_EDITORS.get(_BUILTIN_ALIASES.get(key, key))
    return builtin or GENERIC_EDITOR
