"""Vocabulary Builder - merges built-in catalogs with tenant custom fields"""
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import RuleType
from ..domain.models import CustomFieldDefinition, Option
from ..utils.logger import get_logger
from .catalogs import (
    BASE_TRIGGERS, BASE_CONDITION_FIELDS, BASE_CONDITION_OPERATORS, BASE_ACTION_TYPES,
)
from .registry import FALLBACK_OPERATORS, operators_for_field_type

logger = get_logger(__name__)


class Vocabulary(BaseModel):
    """Selectable triggers, fields, operators and actions at a point in time"""
    model_config = ConfigDict(frozen=True)

    triggers: Dict[str, Tuple[Option, ...]] = Field(default_factory=dict)
    condition_fields: Tuple[Option, ...] = ()
    operators: Dict[str, Tuple[Option, ...]] = Field(default_factory=dict)
    action_types: Tuple[Option, ...] = ()
    # Keyed by both cf_<id> and set_cf_<id>
    custom_fields: Dict[str, CustomFieldDefinition] = Field(default_factory=dict)

    def triggers_for(self, rule_type: Union[RuleType, str, None]) -> Tuple[Option, ...]:
        key = rule_type.value if isinstance(rule_type, RuleType) else rule_type
        return self.triggers.get(key or "", ())

    def has_trigger(self, rule_type: Union[RuleType, str, None], trigger: str) -> bool:
        return any(option.value == trigger for option in self.triggers_for(rule_type))

    def trigger_label(self, rule_type: Union[RuleType, str, None], trigger: str) -> str:
        """Label of a trigger, or the raw key when the catalog does not know it"""
        for option in self.triggers_for(rule_type):
            if option.value == trigger:
                return option.label
        return trigger

    def has_condition_field(self, key: str) -> bool:
        return any(option.value == key for option in self.condition_fields)

    def has_action_type(self, key: str) -> bool:
        return any(option.value == key for option in self.action_types)

    def custom_field_for(self, key: str) -> Optional[CustomFieldDefinition]:
        return self.custom_fields.get(key)


def operators_for(field_key: str, vocabulary: Vocabulary) -> Tuple[Option, ...]:
    """Operators valid for a condition row's field; {is, is_not} when unknown"""
    return vocabulary.operators.get(field_key) or FALLBACK_OPERATORS


class VocabularyBuilder:
    """
    Combine immutable base tables with a dynamic list of custom fields

    Built-ins come first; custom fields are appended in the order they were
    fetched. The base tables are copied, never mutated, so ``build`` is
    idempotent for the same input.
    """

    def __init__(
        self,
        base_triggers: Mapping[RuleType, Tuple[Option, ...]] = BASE_TRIGGERS,
        base_condition_fields: Tuple[Option, ...] = BASE_CONDITION_FIELDS,
        base_operators: Mapping[str, Tuple[Option, ...]] = BASE_CONDITION_OPERATORS,
        base_action_types: Tuple[Option, ...] = BASE_ACTION_TYPES,
    ):
        self._base_triggers = {rule_type.value: tuple(options) for rule_type, options in base_triggers.items()}
        self._base_condition_fields = tuple(base_condition_fields)
        self._base_operators = {key: tuple(options) for key, options in base_operators.items()}
        self._base_action_types = tuple(base_action_types)

    def build(self, custom_fields: Iterable[CustomFieldDefinition] = ()) -> Vocabulary:
        """
        Produce the merged vocabulary

        Args:
            custom_fields: Custom field definitions in fetch order. Inactive
                or archived fields are skipped; a repeated id keeps its
                first occurrence.

        Returns:
            New Vocabulary instance
        """
        selected = self._select(custom_fields)

        triggers = dict(self._base_triggers)
        triggers[RuleType.TICKET_UPDATE.value] = self._base_triggers.get(RuleType.TICKET_UPDATE.value, ()) + tuple(
            Option(value=cf.trigger_key, label=f"{cf.label} is changed") for cf in selected
        )

        condition_fields = self._base_condition_fields + tuple(
            Option(value=cf.condition_key, label=cf.label) for cf in selected
        )

        operators = dict(self._base_operators)
        for cf in selected:
            operators[cf.condition_key] = operators_for_field_type(cf.field_type)

        action_types = self._base_action_types + tuple(
            Option(value=cf.action_key, label=f"Set {cf.label}") for cf in selected
        )

        by_key: Dict[str, CustomFieldDefinition] = {}
        for cf in selected:
            by_key[cf.condition_key] = cf
            by_key[cf.action_key] = cf

        logger.debug(
            f"Built vocabulary with {len(selected)} custom fields",
            extra={"custom_field_count": len(selected)}
        )

        return Vocabulary(
            triggers=triggers,
            condition_fields=condition_fields,
            operators=operators,
            action_types=action_types,
            custom_fields=by_key,
        )

    @staticmethod
    def _select(custom_fields: Iterable[CustomFieldDefinition]) -> List[CustomFieldDefinition]:
        seen = set()
        selected = []
        for cf in custom_fields:
            if not cf.is_selectable or cf.id in seen:
                continue
            seen.add(cf.id)
            selected.append(cf)
        return selected
