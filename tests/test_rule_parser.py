"""Tests for rule notation parsing.

Covers compact B/S notation, the delimited custom-rule fields, and the
validation errors raised for user-authored input.
"""

import itertools

import pytest
from src.rules import (
    RuleSet, RuleParseError, EmptyInputError, InvalidCharacterError,
    parse_compact_notation, parse_delimited_notation
)


class TestCompactNotation:
    """Test B<digits>/S<digits> parsing."""

    def test_conway(self):
        """B3/S23 parses to standard Conway rules."""
        rule_set = parse_compact_notation("B3/S23")
        assert rule_set.birth == {3}
        assert rule_set.survival == {2, 3}
        assert rule_set == RuleSet.conway()

    def test_multi_digit_birth(self):
        """Each digit after the marker is a separate neighbor count."""
        rule_set = parse_compact_notation("B36/S23")
        assert rule_set.birth == {3, 6}

    def test_birth_only_digit_strings(self):
        """Birth-only rules yield the digit set and empty survival."""
        digits = "012345678"
        for length in range(1, len(digits) + 1):
            for combo in itertools.combinations(digits, length):
                text = ''.join(combo)
                rule_set = parse_compact_notation("B" + text)
                assert rule_set.birth == {int(ch) for ch in text}
                assert rule_set.survival == set()

    def test_empty_survival_half(self):
        """Seeds (B2/S) has no survival conditions."""
        rule_set = parse_compact_notation("B2/S")
        assert rule_set.birth == {2}
        assert rule_set.survival == set()

    def test_missing_birth_marker(self):
        """A segment without its marker yields an empty half, not an error."""
        rule_set = parse_compact_notation("3/S23")
        assert rule_set.birth == set()
        assert rule_set.survival == {2, 3}

    def test_wrong_survival_marker(self):
        """Survival segment must start with S."""
        rule_set = parse_compact_notation("B3/X23")
        assert rule_set.birth == {3}
        assert rule_set.survival == set()

    def test_lowercase_markers_not_accepted(self):
        """Markers are upper-case only."""
        rule_set = parse_compact_notation("b3/s23")
        assert rule_set.is_empty

    def test_empty_string(self):
        """Empty input degrades to an empty rule."""
        assert parse_compact_notation("").is_empty

    def test_duplicate_digits_collapse(self):
        """Repeated digits have set semantics."""
        rule_set = parse_compact_notation("B33/S3223")
        assert rule_set.birth == {3}
        assert rule_set.survival == {2, 3}

    def test_nine_dropped(self):
        """9 is a digit but not a valid neighbor count."""
        rule_set = parse_compact_notation("B39/S9")
        assert rule_set.birth == {3}
        assert rule_set.survival == set()

    def test_all_counts(self):
        """Flakes survives with any neighbor count."""
        rule_set = parse_compact_notation("B3/S012345678")
        assert rule_set.survival == set(range(9))


class TestDelimitedNotation:
    """Test custom rule field parsing."""

    def test_both_empty_raises(self):
        """At least one field must carry content."""
        with pytest.raises(EmptyInputError):
            parse_delimited_notation("", "")

    def test_whitespace_only_raises(self):
        """Whitespace-only fields count as empty."""
        with pytest.raises(EmptyInputError):
            parse_delimited_notation("   ", "\t")

    def test_none_fields_treated_as_empty(self):
        """Missing field values behave like empty strings."""
        with pytest.raises(EmptyInputError):
            parse_delimited_notation(None, None)

    def test_comma_list_and_digit_run(self):
        """Comma lists and plain digit runs are equivalent."""
        rule_set = parse_delimited_notation("3,7", "23")
        assert rule_set.birth == {3, 7}
        assert rule_set.survival == {2, 3}

        assert parse_delimited_notation("37", "23").birth == rule_set.birth

    def test_surrounding_whitespace_ignored_for_digit_run(self):
        """Padding around a digit run does not turn it into a number list."""
        rule_set = parse_delimited_notation(" 37", "23 ")
        assert rule_set.birth == {3, 7}
        assert rule_set.survival == {2, 3}

    def test_space_and_mixed_separators(self):
        """Whitespace and commas may be mixed freely."""
        rule_set = parse_delimited_notation("3 7", " 2 ,, 3 ")
        assert rule_set.birth == {3, 7}
        assert rule_set.survival == {2, 3}

    def test_out_of_range_dropped(self):
        """A lone 9 is silently dropped rather than rejected."""
        rule_set = parse_delimited_notation("9", "")
        assert rule_set.birth == set()
        assert rule_set.survival == set()

    def test_multi_digit_tokens_dropped(self):
        """Tokens like 10 fall outside 0-8 and are dropped."""
        rule_set = parse_delimited_notation("3, 10, 12", "2")
        assert rule_set.birth == {3}

    def test_one_side_empty(self):
        """A single populated field is enough."""
        rule_set = parse_delimited_notation("", "2,3")
        assert rule_set.birth == set()
        assert rule_set.survival == {2, 3}

    def test_duplicates_collapse(self):
        """Repeated values collapse into one."""
        rule_set = parse_delimited_notation("3,3,3", "2 2")
        assert rule_set.birth == {3}
        assert rule_set.survival == {2}

    def test_semicolon_rejected(self):
        """Semicolons are not a permitted separator."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse_delimited_notation("3;7", "2")
        assert exc_info.value.field == "birth"

    def test_invalid_survival_field_named(self):
        """Error identifies the failing field."""
        with pytest.raises(InvalidCharacterError, match="survival") as exc_info:
            parse_delimited_notation("3", "2-3")
        assert exc_info.value.field == "survival"

    def test_letters_rejected(self):
        """Letters are rejected even when mixed with digits."""
        with pytest.raises(InvalidCharacterError):
            parse_delimited_notation("B3", "")

    def test_errors_are_value_errors(self):
        """Parse errors can be handled as ValueError."""
        with pytest.raises(ValueError):
            parse_delimited_notation("x", "")
        assert issubclass(EmptyInputError, RuleParseError)
        assert issubclass(InvalidCharacterError, RuleParseError)

    def test_empty_check_precedes_character_check(self):
        """Both-empty input reports EmptyInputError."""
        with pytest.raises(EmptyInputError):
            parse_delimited_notation(" ", "")
