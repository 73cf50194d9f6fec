"""
Life-like rule notation: parsing, validation and the built-in catalog.
"""

from .errors import RuleParseError, EmptyInputError, InvalidCharacterError
from .ruleset import RuleSet, NEIGHBOR_COUNTS
from .parser import parse_compact_notation, parse_delimited_notation
from .presets import RulePreset, RULE_PRESETS, get_preset, list_presets

__all__ = [
    'RuleParseError',
    'EmptyInputError',
    'InvalidCharacterError',
    'RuleSet',
    'NEIGHBOR_COUNTS',
    'parse_compact_notation',
    'parse_delimited_notation',
    'RulePreset',
    'RULE_PRESETS',
    'get_preset',
    'list_presets',
]
