"""
Password and email validation helpers used by registration and password changes
"""
import re
from typing import List

from pydantic import BaseModel

from videotube.core.config import settings


class PasswordValidationResult(BaseModel):
    """Result of password validation"""
    is_valid: bool
    errors: List[str] = []


def validate_password_strength(password: str) -> PasswordValidationResult:
    """
    Validate password strength against security requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one number
    - At least one special character
    """
    errors = []

    if not password:
        errors.append("Password is required")
        return PasswordValidationResult(is_valid=False, errors=errors)

    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        errors.append("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        errors.append("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        errors.append("Password must contain at least one number")

    if not re.search(r'[^A-Za-z0-9]', password):
        errors.append("Password must contain at least one special character")

    return PasswordValidationResult(
        is_valid=len(errors) == 0,
        errors=errors
    )


def is_blocked_email_domain(email: str) -> bool:
    """Disposable mailbox providers are refused at registration"""
    domain = email.rsplit("@", 1)[-1].lower()
    return domain in settings.BLOCKED_EMAIL_DOMAINS
