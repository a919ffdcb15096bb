"""
Identity domain object for synctivity.

The person whose activity is being synchronized: a display name and one or
more email aliases. The first alias signs replayed commits.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..exit_codes import ValidationError
from .email import EmailAddress


@dataclass(frozen=True)
class Identity:
    """Display name plus an ordered, non-empty tuple of email aliases."""
    name: str
    emails: Tuple[EmailAddress, ...]

    def __post_init__(self):
        if not self.emails:
            raise ValidationError("An author requires at least one email address.")

    @classmethod
    def create(
        cls,
        name: str,
        emails: Iterable[Union[str, EmailAddress]]
    ) -> 'Identity':
        """
        Build an Identity from a name and raw or parsed emails.

        Raises:
            ValidationError: for an empty alias list
            InvalidEmailAddressError: for a malformed email
        """
        parsed = []
        for email in emails:
            if isinstance(email, EmailAddress):
                parsed.append(email)
            else:
                parsed.extend(EmailAddress.parse_list(email))
        return cls(name=name, emails=tuple(parsed))

    def signature_email(self) -> EmailAddress:
        """The alias used to stamp replayed commits."""
        return self.emails[0]

    def matches(self, email: Optional[str]) -> bool:
        """True if a raw author email equals one of the aliases."""
        return any(alias.matches(email) for alias in self.emails)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'emails': [str(email) for email in self.emails],
        }
