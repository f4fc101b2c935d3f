"""User entity and its validation rules."""
import html
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from usercrud.exceptions import ValidationError


@dataclass
class User:
    """
    Request-scoped user value.

    Holds plaintext or hashed password depending on where it came from;
    only the repository turns it into a stored row.
    """

    address: str = ""
    email: str = ""
    password: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def normalize(self) -> "User":
        """Trim and HTML-escape address and email, reset id and timestamps."""
        now = datetime.utcnow()
        self.id = None
        self.address = html.escape(self.address.strip())
        self.email = html.escape(self.email.strip())
        self.created_at = now
        self.updated_at = now
        return self

    def validate(self, action: str = "create") -> None:
        """
        Check the rules for ``action`` in order and raise on the first failure.

        Raises:
            ValidationError: with the message of the failing rule
        """
        rules = VALIDATION_RULES.get(action.lower(), VALIDATION_RULES["create"])
        for check, message in rules:
            if not check(self):
                raise ValidationError(message)


def _has_address(user: User) -> bool:
    return bool(user.address)


def _has_password(user: User) -> bool:
    return bool(user.password)


def _has_email(user: User) -> bool:
    return bool(user.email)


def _email_well_formed(user: User) -> bool:
    try:
        validate_email(user.email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


Rule = Tuple[Callable[[User], bool], str]

_WRITE_RULES: Tuple[Rule, ...] = (
    (_has_address, "Required Address"),
    (_has_password, "Required Password"),
    (_has_email, "Required Email"),
    (_email_well_formed, "Invalid Email"),
)

_LOGIN_RULES: Tuple[Rule, ...] = (
    (_has_password, "Required Password"),
    (_has_email, "Required Email"),
    (_email_well_formed, "Invalid Email"),
)

VALIDATION_RULES: Dict[str, Tuple[Rule, ...]] = {
    "create": _WRITE_RULES,
    "update": _WRITE_RULES,
    "login": _LOGIN_RULES,
}
