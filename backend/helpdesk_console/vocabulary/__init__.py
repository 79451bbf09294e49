"""Rule builder vocabulary - catalogs, registry and merger"""
from .builder import Vocabulary, VocabularyBuilder, operators_for
from .registry import (
    FALLBACK_OPERATORS,
    is_presence_operator,
    operators_for_field_type,
    value_editor_for,
)

__all__ = [
    "Vocabulary",
    "VocabularyBuilder",
    "operators_for",
    "FALLBACK_OPERATORS",
    "is_presence_operator",
    "operators_for_field_type",
    "value_editor_for",
]
