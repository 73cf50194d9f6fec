"""Parsers turning rule notation text into RuleSet values.

Two surface notations are accepted:

- Compact notation such as ``B3/S23``. Missing or wrongly prefixed halves
  simply yield an empty set, so this parser never fails on string input.
- Delimited notation, where birth and survival are entered as separate
  fields (``"3,7"``, ``"3 7"`` or ``"37"``). This is what users type in the
  custom rule editor, so it is validated and raises on malformed input.
"""

import re
from typing import FrozenSet
import logging

from .errors import EmptyInputError, InvalidCharacterError
from .ruleset import RuleSet, NEIGHBOR_COUNTS, BIRTH_MARKER, SURVIVAL_MARKER

logger = logging.getLogger(__name__)

_ALLOWED_CHARS = re.compile(r'[0-9,\s]*')
_DIGIT_RUN = re.compile(r'[0-9]+')
_SEPARATORS = re.compile(r'[,\s]+')

DIGITS = '0123456789'


def _digits(segment: str) -> FrozenSet[int]:
    """Decompose a run of digits into single-digit neighbor counts."""
    counts = {int(ch) for ch in segment if ch in DIGITS}
    # 9 is a valid digit but not a valid neighbor count
    return frozenset(counts & NEIGHBOR_COUNTS)


def parse_compact_notation(rule_string: str) -> RuleSet:
    """Parse compact ``B<digits>/S<digits>`` notation.

    Args:
        rule_string: Rule such as ``"B36/S23"`` or ``"B2/S"``

    Returns:
        Parsed RuleSet; halves that are missing or lack their marker are empty
    """
    parts = rule_string.split('/')
    birth: FrozenSet[int] = frozenset()
    survival: FrozenSet[int] = frozenset()

    if parts[0].startswith(BIRTH_MARKER):
        birth = _digits(parts[0][len(BIRTH_MARKER):])

    if len(parts) > 1 and parts[1].startswith(SURVIVAL_MARKER):
        survival = _digits(parts[1][len(SURVIVAL_MARKER):])

    rule_set = RuleSet(birth, survival)
    logger.debug(f"Parsed compact rule {rule_string!r} -> {rule_set.rule_string}")
    return rule_set


def _parse_numbers(text: str) -> FrozenSet[int]:
    text = text.strip()
    if not text:
        return frozenset()

    # "37" means {3, 7}, not thirty-seven
    if _DIGIT_RUN.fullmatch(text):
        return _digits(text)

    counts = set()
    for token in _SEPARATORS.split(text):
        if not token:
            continue
        try:
            value = int(token)
        except ValueError:
            logger.debug(f"Dropping non-numeric rule token {token!r}")
            continue
        if value in NEIGHBOR_COUNTS:
            counts.add(value)
        else:
            logger.debug(f"Dropping out-of-range rule token {token!r}")
    return frozenset(counts)


def parse_delimited_notation(birth_text: str, survival_text: str) -> RuleSet:
    """Parse birth and survival fields of a user-authored rule.

    Each field is either a plain digit run (``"23"``) or a list of numbers
    separated by commas and/or whitespace (``"2, 3"``). Tokens that are not
    numbers or fall outside 0-8 are dropped rather than rejected.

    Args:
        birth_text: Birth neighbor counts
        survival_text: Survival neighbor counts

    Returns:
        Parsed RuleSet

    Raises:
        EmptyInputError: If both fields are empty or whitespace-only
        InvalidCharacterError: If a field contains anything other than
            digits, commas and whitespace
    """
    birth_text = birth_text or ''
    survival_text = survival_text or ''

    if not birth_text.strip() and not survival_text.strip():
        raise EmptyInputError()

    for field_name, text in (('birth', birth_text), ('survival', survival_text)):
        if not _ALLOWED_CHARS.fullmatch(text):
            raise InvalidCharacterError(field_name, text)

    rule_set = RuleSet(_parse_numbers(birth_text), _parse_numbers(survival_text))
    logger.debug(f"Parsed delimited rule ({birth_text!r}, {survival_text!r}) -> {rule_set.rule_string}")
    return rule_set
