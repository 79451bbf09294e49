"""Rule List/Summary View - read-only projection of persisted rules"""
from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, Field

from ..domain.enums import RuleType
from ..domain.models import AutomationRule
from ..utils.logger import get_logger
from ..vocabulary import Vocabulary
from ..vocabulary.catalogs import RULE_TYPE_LABELS, RULE_TYPE_ORDER

logger = get_logger(__name__)

DEFAULT_BUCKET = RuleType.TICKET_CREATION


class RuleCard(BaseModel):
    """One rule as shown in its bucket"""
    id: str
    name: str
    subtitle: str
    is_active: bool
    trigger: str
    trigger_label: str
    condition_count: int
    action_count: int
    execution_count: int


class RuleBucket(BaseModel):
    """Rules of a single rule type"""
    rule_type: RuleType
    label: str
    description: str
    rules: List[RuleCard] = Field(default_factory=list)


class RuleSummary(BaseModel):
    """Automation page: three fixed buckets plus totals"""
    buckets: List[RuleBucket]
    total_rules: int
    active_rules: int
    total_executions: int


def bucket_for(rule: AutomationRule) -> RuleType:
    """
    Rule type bucket for a persisted rule

    Missing or unknown types land in ticket_creation.
    TODO: revisit once the helpdesk API guarantees rule_type; the fallback can
    hide rules saved with a bad type.
    """
    try:
        return RuleType(rule.rule_type)
    except ValueError:
        logger.warning(
            f"Rule {rule.id} has unknown rule type {rule.rule_type!r}, grouping as {DEFAULT_BUCKET.value}",
            extra={"rule_id": rule.id, "rule_type": rule.rule_type}
        )
        return DEFAULT_BUCKET


def _card(rule: AutomationRule, rule_type: RuleType, vocabulary: Optional[Vocabulary]) -> RuleCard:
    trigger_label = vocabulary.trigger_label(rule_type, rule.trigger) if vocabulary else rule.trigger
    return RuleCard(
        id=rule.id,
        name=rule.name,
        subtitle=rule.description or trigger_label,
        is_active=rule.is_active,
        trigger=rule.trigger,
        trigger_label=trigger_label,
        condition_count=len(rule.conditions),
        action_count=len(rule.actions),
        execution_count=rule.execution_count,
    )


def summarize_rules(
    rules: Iterable[AutomationRule],
    vocabulary: Optional[Vocabulary] = None,
) -> RuleSummary:
    """
    Group rules by type, keeping the server's order inside each bucket

    Args:
        rules: Rules as returned by the helpdesk API
        vocabulary: Used to resolve trigger labels; raw keys otherwise

    Returns:
        RuleSummary with buckets in ticket_creation, ticket_update,
        time_trigger order
    """
    rules = list(rules)
    grouped: Dict[RuleType, List[RuleCard]] = {rule_type: [] for rule_type in RULE_TYPE_ORDER}
    for rule in rules:
        rule_type = bucket_for(rule)
        grouped[rule_type].append(_card(rule, rule_type, vocabulary))

    buckets = [
        RuleBucket(
            rule_type=rule_type,
            label=RULE_TYPE_LABELS[rule_type]["label"],
            description=RULE_TYPE_LABELS[rule_type]["description"],
            rules=grouped[rule_type],
        )
        for rule_type in RULE_TYPE_ORDER
    ]

    return RuleSummary(
        buckets=buckets,
        total_rules=len(rules),
        active_rules=sum(1 for rule in rules if rule.is_active),
        total_executions=sum(rule.execution_count for rule in rules),
    )
