"""Errors raised while parsing rule notation."""


class RuleParseError(ValueError):
    """Base class for rule notation failures."""


class EmptyInputError(RuleParseError):
    """Both birth and survival fields were empty."""

    def __init__(self, message: str = "At least one of birth or survival must contain values"):
        super().__init__(message)


class InvalidCharacterError(RuleParseError):
    """A rule field contained characters other than digits, commas or whitespace."""

    def __init__(self, field: str, text: str):
        self.field = field
        self.text = text
        super().__init__(
            f"Invalid {field} rule {text!r}: only digits, commas and spaces are allowed"
        )
