"""Rule list grouping and totals"""

import logging

from helpdesk_console.domain.enums import RuleType
from helpdesk_console.domain.models import AutomationRule
from helpdesk_console.views import bucket_for, summarize_rules


def _rule(rule_id: str, **fields) -> AutomationRule:
    data = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "ruleType": "ticket_creation",
        "trigger": "on_create",
        "actions": [{"type": "set_status", "value": "open"}],
    }
    data.update(fields)
    return AutomationRule.model_validate(data)


def _bucket(summary, rule_type: RuleType):
    return next(b for b in summary.buckets if b.rule_type == rule_type)


class TestBuckets:
    def test_three_buckets_in_fixed_order(self):
        summary = summarize_rules([])
        assert [b.rule_type for b in summary.buckets] == [
            RuleType.TICKET_CREATION,
            RuleType.TICKET_UPDATE,
            RuleType.TIME_TRIGGER,
        ]
        assert [b.label for b in summary.buckets] == ["Ticket Creation", "Ticket Updates", "Time Triggers"]
        assert all(b.rules == [] for b in summary.buckets)

    def test_rules_grouped_in_server_order(self):
        rules = [
            _rule("1", ruleType="ticket_update", trigger="status_changed"),
            _rule("2"),
            _rule("3", ruleType="time_trigger", trigger="daily"),
            _rule("4", ruleType="ticket_update", trigger="reply_added"),
        ]
        summary = summarize_rules(rules)

        assert [c.id for c in _bucket(summary, RuleType.TICKET_CREATION).rules] == ["2"]
        assert [c.id for c in _bucket(summary, RuleType.TICKET_UPDATE).rules] == ["1", "4"]
        assert [c.id for c in _bucket(summary, RuleType.TIME_TRIGGER).rules] == ["3"]

    def test_every_rule_in_exactly_one_bucket(self):
        rules = [_rule(str(i), ruleType=t) for i, t in enumerate(
            ["ticket_creation", "ticket_update", "time_trigger", "bogus", None]
        )]
        summary = summarize_rules(rules)
        ids = [card.id for bucket in summary.buckets for card in bucket.rules]
        assert sorted(ids) == sorted(r.id for r in rules)


class TestUnknownRuleType:
    def test_unknown_type_falls_back_to_creation(self, caplog):
        rule = _rule("9", ruleType="nightly_batch")
        with caplog.at_level(logging.WARNING):
            assert bucket_for(rule) == RuleType.TICKET_CREATION
        assert "nightly_batch" in caplog.text

    def test_missing_type_falls_back_to_creation(self):
        rule = AutomationRule.model_validate({"id": "8", "name": "No type"})
        assert rule.rule_type is None
        assert bucket_for(rule) == RuleType.TICKET_CREATION


class TestCards:
    def test_card_counts(self, vocabulary):
        rule = _rule(
            "5",
            name="Escalate urgent",
            ruleType="ticket_update",
            trigger="priority_changed",
            conditions=[{"field": "priority", "operator": "is", "value": "urgent"}],
            actions=[{"type": "set_status", "value": "pending"}, {"type": "add_tag", "value": "vip"}],
            executionCount=12,
        )
        card = _bucket(summarize_rules([rule], vocabulary), RuleType.TICKET_UPDATE).rules[0]

        assert card.name == "Escalate urgent"
        assert card.condition_count == 1
        assert card.action_count == 2
        assert card.execution_count == 12
        assert card.trigger_label == "Priority is changed"
        assert card.subtitle == "Priority is changed"

    def test_description_used_as_subtitle(self):
        rule = _rule("6", description="Routes new billing tickets")
        card = summarize_rules([rule]).buckets[0].rules[0]
        assert card.subtitle == "Routes new billing tickets"
        assert card.trigger_label == "on_create"

    def test_custom_field_trigger_label(self, vocabulary):
        rule = _rule("7", ruleType="ticket_update", trigger="cf_42_changed")
        card = _bucket(summarize_rules([rule], vocabulary), RuleType.TICKET_UPDATE).rules[0]
        assert card.trigger_label == "Priority Score is changed"

    def test_untyped_stored_values_read_as_text(self):
        rule = _rule(
            "1",
            conditions=[
                {"field": "hoursInStatus", "operator": "gte", "value": 24},
                {"field": "cf_9", "operator": "is", "value": True},
                {"field": "cf_11", "operator": "is_set", "value": None},
            ],
            actions=[{"type": "notify", "target": "agent"}],
        )

        assert [c.value for c in rule.conditions] == ["24", "true", ""]
        card = summarize_rules([rule]).buckets[0].rules[0]
        assert (card.condition_count, card.action_count) == (3, 1)

    def test_missing_counts_default_to_zero(self):
        rule = AutomationRule.model_validate({
            "id": "10", "name": "Sparse", "ruleType": "time_trigger",
            "conditions": None, "actions": None, "executionCount": None,
        })
        card = summarize_rules([rule]).buckets[2].rules[0]
        assert (card.condition_count, card.action_count, card.execution_count) == (0, 0, 0)


class TestTotals:
    def test_totals(self):
        rules = [
            _rule("1", isActive=True, executionCount=3),
            _rule("2", ruleType="ticket_update", isActive=False, executionCount=5),
            _rule("3", ruleType="bogus", isActive=True, executionCount=0),
        ]
        summary = summarize_rules(rules)

        assert summary.total_rules == 3
        assert summary.active_rules == 2
        assert summary.total_executions == 8

    def test_empty(self):
        summary = summarize_rules([])
        assert (summary.total_rules, summary.active_rules, summary.total_executions) == (0, 0, 0)
