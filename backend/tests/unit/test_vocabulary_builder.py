"""Dynamic merger of built-in catalogs and tenant custom fields"""

from helpdesk_console.domain.enums import RuleType
from helpdesk_console.domain.models import CustomFieldDefinition
from helpdesk_console.vocabulary import FALLBACK_OPERATORS, VocabularyBuilder, operators_for
from helpdesk_console.vocabulary.catalogs import (
    BASE_ACTION_TYPES,
    BASE_CONDITION_FIELDS,
    BASE_CONDITION_OPERATORS,
    BASE_TRIGGERS,
)

from tests.conftest import make_custom_field


def _values(options):
    return [option.value for option in options]


def _field(*args, **kwargs) -> CustomFieldDefinition:
    return CustomFieldDefinition.model_validate(make_custom_field(*args, **kwargs))


class TestBaseVocabulary:
    """With no custom fields the vocabulary equals the built-in tables"""

    def test_equals_base_tables(self, base_vocabulary):
        assert base_vocabulary.condition_fields == BASE_CONDITION_FIELDS
        assert base_vocabulary.action_types == BASE_ACTION_TYPES
        for rule_type, triggers in BASE_TRIGGERS.items():
            assert base_vocabulary.triggers_for(rule_type) == triggers
        for key, operators in BASE_CONDITION_OPERATORS.items():
            assert base_vocabulary.operators[key] == operators
        assert base_vocabulary.custom_fields == {}

    def test_assignee_uses_assignment_operators(self, base_vocabulary):
        labels = [o.label for o in operators_for("assignee", base_vocabulary)]
        assert labels == ["is assigned", "is not assigned"]


class TestCustomFieldMerge:
    """Custom fields are appended after the built-ins"""

    def test_number_field_scenario(self, priority_score_field):
        vocabulary = VocabularyBuilder().build([priority_score_field])

        assert vocabulary.condition_fields[-1].value == "cf_42"
        assert vocabulary.condition_fields[-1].label == "Priority Score"
        assert _values(operators_for("cf_42", vocabulary)) == [
            "is", "is_not", "greater_than", "less_than", "is_empty", "is_not_empty",
        ]

    def test_trigger_and_action_added(self, priority_score_field):
        vocabulary = VocabularyBuilder().build([priority_score_field])

        update_triggers = vocabulary.triggers_for(RuleType.TICKET_UPDATE)
        assert update_triggers[-1].value == "cf_42_changed"
        assert update_triggers[-1].label == "Priority Score is changed"
        assert vocabulary.action_types[-1].value == "set_cf_42"
        assert vocabulary.action_types[-1].label == "Set Priority Score"

    def test_other_rule_types_untouched(self, vocabulary):
        assert vocabulary.triggers_for(RuleType.TICKET_CREATION) == BASE_TRIGGERS[RuleType.TICKET_CREATION]
        assert vocabulary.triggers_for("time_trigger") == BASE_TRIGGERS[RuleType.TIME_TRIGGER]

    def test_builtins_come_first_in_fetch_order(self, vocabulary):
        base_count = len(BASE_CONDITION_FIELDS)
        assert vocabulary.condition_fields[:base_count] == BASE_CONDITION_FIELDS
        assert _values(vocabulary.condition_fields[base_count:]) == ["cf_42", "cf_7", "cf_9", "cf_11"]
        assert _values(vocabulary.action_types[len(BASE_ACTION_TYPES):]) == [
            "set_cf_42", "set_cf_7", "set_cf_9", "set_cf_11",
        ]

    def test_keys_are_unique(self, vocabulary):
        fields = _values(vocabulary.condition_fields)
        actions = _values(vocabulary.action_types)
        triggers = _values(vocabulary.triggers_for(RuleType.TICKET_UPDATE))
        assert len(fields) == len(set(fields))
        assert len(actions) == len(set(actions))
        assert len(triggers) == len(set(triggers))

    def test_every_condition_field_has_operators(self, vocabulary):
        for option in vocabulary.condition_fields:
            assert operators_for(option.value, vocabulary)

    def test_custom_field_lookup(self, vocabulary):
        assert vocabulary.custom_field_for("cf_7").label == "Region"
        assert vocabulary.custom_field_for("set_cf_7").label == "Region"
        assert vocabulary.custom_field_for("status") is None

    def test_duplicate_ids_keep_first(self):
        first = _field("42", "Priority Score", "number")
        second = _field("42", "Renamed Score", "text")
        vocabulary = VocabularyBuilder().build([first, second])

        custom = [o for o in vocabulary.condition_fields if o.value == "cf_42"]
        assert len(custom) == 1
        assert custom[0].label == "Priority Score"
        assert "greater_than" in _values(operators_for("cf_42", vocabulary))

    def test_inactive_and_archived_fields_skipped(self):
        fields = [
            _field("1", "Old", "text", isActive=False),
            _field("2", "Gone", "text", isArchived=True),
            _field("3", "Kept", "text"),
        ]
        vocabulary = VocabularyBuilder().build(fields)

        assert "cf_1" not in _values(vocabulary.condition_fields)
        assert "set_cf_2" not in _values(vocabulary.action_types)
        assert vocabulary.condition_fields[-1].value == "cf_3"

    def test_unknown_field_type_gets_fallback_operators(self):
        vocabulary = VocabularyBuilder().build([_field("8", "Level", "dependent")])
        assert operators_for("cf_8", vocabulary) == FALLBACK_OPERATORS


class TestBuildIsPure:
    def test_idempotent(self, custom_fields):
        builder = VocabularyBuilder()
        assert builder.build(custom_fields) == builder.build(custom_fields)

    def test_base_tables_not_mutated(self, custom_fields):
        before_fields = BASE_CONDITION_FIELDS
        before_update = BASE_TRIGGERS[RuleType.TICKET_UPDATE]

        builder = VocabularyBuilder()
        builder.build(custom_fields)

        assert BASE_CONDITION_FIELDS == before_fields
        assert BASE_TRIGGERS[RuleType.TICKET_UPDATE] == before_update
        assert "cf_42" not in BASE_CONDITION_OPERATORS
        assert builder.build([]).condition_fields == BASE_CONDITION_FIELDS


class TestVocabularyLookups:
    def test_unknown_field_operators_fall_back(self, base_vocabulary):
        assert operators_for("cf_999", base_vocabulary) == FALLBACK_OPERATORS

    def test_trigger_label_falls_back_to_key(self, vocabulary):
        assert vocabulary.trigger_label("ticket_update", "cf_42_changed") == "Priority Score is changed"
        assert vocabulary.trigger_label("ticket_update", "legacy_trigger") == "legacy_trigger"

    def test_unknown_rule_type_has_no_triggers(self, vocabulary):
        assert vocabulary.triggers_for("nightly_batch") == ()
        assert not vocabulary.has_trigger(None, "on_create")
