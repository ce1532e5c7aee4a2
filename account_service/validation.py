"""
Declarative request validation.

A rule set maps each field name to an ordered tuple of rules. A rule takes the
field value and returns an error template (formatted with ``attribute``) or
``None``. Fields stop at their first failing rule; all fields are checked
before ``ValidationError`` is raised, so callers see every bad field at once.
"""
import re
from typing import Callable, Dict, Mapping, Optional, Tuple

from .errors import ValidationError

Rule = Callable[[Optional[str]], Optional[str]]

EMAIL_PATTERN = re.compile(
    r'^(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r'@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$'
)

# upper case, lower case, digit, and one of: #?!@$ %^&*-
PASSWORD_PATTERN = re.compile(r"^(?=.*?[A-Z])(?=.*?[a-z])(?=.*?[0-9])(?=.*?[#?!@$ %^&*-]).*$")

PASSWORD_MIN_LENGTH = 8


def required(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return "The {attribute} field is required."
    return None


def email(value: Optional[str]) -> Optional[str]:
    # the pattern is the only check, no RFC parser or DNS lookup behind it
    if not EMAIL_PATTERN.fullmatch(value):
        return "The {attribute} field must be a valid email address."
    return None


def min_length(length: int) -> Rule:
    def rule(value: Optional[str]) -> Optional[str]:
        if len(value) < length:
            return "The {attribute} field must be at least %d characters." % length
        return None
    return rule


def matches(pattern: "re.Pattern") -> Rule:
    def rule(value: Optional[str]) -> Optional[str]:
        if not pattern.match(value):
            return "The {attribute} field format is invalid."
        return None
    return rule


PASSWORD_RULES: Tuple[Rule, ...] = (required, min_length(PASSWORD_MIN_LENGTH), matches(PASSWORD_PATTERN))

REGISTER_RULES: Dict[str, Tuple[Rule, ...]] = {
    "first_name": (required,),
    "last_name": (required,),
    "email": (required, email),
    "password": PASSWORD_RULES,
}

LOGIN_RULES: Dict[str, Tuple[Rule, ...]] = {
    "email": (required, email),
    "password": (required,),
}

UPDATE_PROFILE_RULES: Dict[str, Tuple[Rule, ...]] = {
    "first_name": (required,),
    "last_name": (required,),
}

CHANGE_PASSWORD_RULES: Dict[str, Tuple[Rule, ...]] = {
    "old_password": (required,),
    "new_password": PASSWORD_RULES,
}


def attribute_name(field: str) -> str:
    return field.replace("_", " ")


def validate(data: Mapping[str, Optional[str]], rules: Mapping[str, Tuple[Rule, ...]]) -> None:
    """
    Check ``data`` against ``rules``.

    Raises:
        ValidationError: with ``{field: [message]}`` for every failing field
    """
    errors: Dict[str, list] = {}
    for field, field_rules in rules.items():
        value = data.get(field)
        for rule in field_rules:
            template = rule(value)
            if template is not None:
                errors[field] = [template.format(attribute=attribute_name(field))]
                break
    if errors:
        raise ValidationError(errors)
