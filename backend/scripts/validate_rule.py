"""Script to validate an automation rule definition offline

Builds the rule builder vocabulary from an optional custom-field export and
checks a rule JSON file the same way the console form does before
submission.

Usage:
    python -m scripts.validate_rule rule.json
    python -m scripts.validate_rule rule.json --custom-fields fields.json
"""
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from helpdesk_console.domain.models import CustomFieldDefinition, RuleDraft
from helpdesk_console.forms import validate_draft
from helpdesk_console.vocabulary import VocabularyBuilder, operators_for


def _load_json(path: str) -> Any:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def validate_rule(rule_data: Dict[str, Any], custom_fields_data: Optional[List[Dict[str, Any]]] = None) -> Dict[str, str]:
    """Validate raw rule JSON; returns field key -> message"""
    try:
        draft = RuleDraft.model_validate(rule_data)
    except PydanticValidationError as e:
        return {
            ".".join(str(part) for part in err["loc"]) or "rule": err["msg"]
            for err in e.errors()
        }

    custom_fields = [CustomFieldDefinition.model_validate(item) for item in custom_fields_data or []]
    vocabulary = VocabularyBuilder().build(custom_fields)
    return validate_draft(draft, vocabulary)


def print_report(rule_data: Dict[str, Any], errors: Dict[str, str], custom_fields_data: Optional[List[Dict[str, Any]]] = None) -> None:
    print(f"Rule: {rule_data.get('name', '<unnamed>')}")
    print(f"   Type: {rule_data.get('ruleType')}")
    print(f"   Trigger: {rule_data.get('trigger')}")
    print(f"   Match: {rule_data.get('conditionMatch', 'all')}")

    custom_fields = [CustomFieldDefinition.model_validate(item) for item in custom_fields_data or []]
    vocabulary = VocabularyBuilder().build(custom_fields)

    conditions = rule_data.get("conditions") or []
    print(f"\nCONDITIONS ({len(conditions)}):")
    for condition in conditions:
        field = condition.get("field", "")
        allowed = ", ".join(op.value for op in operators_for(field, vocabulary))
        print(f"   - {field} {condition.get('operator')} '{condition.get('value', '')}'  [{allowed}]")

    actions = rule_data.get("actions") or []
    print(f"\nACTIONS ({len(actions)}):")
    for action in actions:
        print(f"   - {action.get('type')} '{action.get('value', '')}'")

    print()
    if errors:
        print(f"INVALID ({len(errors)} problems):")
        for key, message in sorted(errors.items()):
            print(f"   {key}: {message}")
    else:
        print("VALID")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate an automation rule JSON file")
    parser.add_argument("rule", help="Path to the rule JSON file")
    parser.add_argument(
        "--custom-fields",
        dest="custom_fields",
        default=None,
        help="Path to a JSON array of ticket custom-field definitions"
    )
    args = parser.parse_args(argv)

    rule_data = _load_json(args.rule)
    custom_fields_data = _load_json(args.custom_fields) if args.custom_fields else []

    errors = validate_rule(rule_data, custom_fields_data)
    print_report(rule_data, errors, custom_fields_data)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
