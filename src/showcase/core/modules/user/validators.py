import re

from showcase.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 6 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")


def normalize_email(email: str) -> str:
    """Lower-case and validate an email address.

    Raises:
        ValidationError: If the address is malformed
    """
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email address")
    return email


def validate_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")
    if len(name) > 100:
        raise ValidationError("Name cannot be more than 100 characters")
    return name
