"""
Email address value object for synctivity.

An EmailAddress is both an Identity alias and the criterion used to match
commit authors, so it is validated once on construction and never changes.
"""

import re
from dataclasses import dataclass

from ..exit_codes import ValidationError


EMAIL_PATTERN = re.compile(r'[A-Za-z0-9_.+-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+')


class InvalidEmailAddressError(ValidationError):
    """Raised when a string is not an acceptable email address."""
    def __init__(self, value: str):
        super().__init__(f"'{value}' is not a valid email address")
        self.value = value


@dataclass(frozen=True)
class EmailAddress:
    """A validated email address."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not EMAIL_PATTERN.fullmatch(self.value):
            raise InvalidEmailAddressError(str(self.value))

    @classmethod
    def parse(cls, text: str) -> 'EmailAddress':
        """
        Parse an email address.

        Accepts `local-part@domain` where the local part uses letters, digits
        and `_ . + -`, and the domain has at least one dot. The whole text
        must match; surrounding whitespace is rejected.

        Raises:
            InvalidEmailAddressError: if the text does not match
        """
        return cls(text)

    @classmethod
    def parse_list(cls, values) -> tuple:
        """
        Parse one or more comma-delimited strings into EmailAddresses.

        Whitespace around each fragment is trimmed, so "a@x.io, b@y.io"
        works. Empty fragments (e.g. a trailing comma) are ignored. Order
        is kept.
        """
        if isinstance(values, str):
            values = [values]

        emails = []
        for value in values:
            for part in value.split(','):
                part = part.strip()
                if part:
                    emails.append(cls.parse(part))
        return tuple(emails)

    def matches(self, email) -> bool:
        """Exact, case-sensitive comparison against a raw author email."""
        return email is not None and self.value == email

    def __str__(self) -> str:
        return self.value
