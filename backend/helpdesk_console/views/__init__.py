"""Read-only projections"""
from .rule_summary import RuleBucket, RuleCard, RuleSummary, bucket_for, summarize_rules

__all__ = ["RuleBucket", "RuleCard", "RuleSummary", "bucket_for", "summarize_rules"]
