"""
Backend Scripts Module

Utility scripts for working with automation rules offline.

Available scripts:
    - validate_rule.py: Validates a rule JSON file against the rule builder vocabulary

Usage:
    python -m scripts.validate_rule rule.json --custom-fields fields.json
"""
