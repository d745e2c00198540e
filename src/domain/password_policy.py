"""
Password policy.

A password must be 8 to 72 characters long and contain a lowercase
letter, an uppercase letter, a digit and one of @$!%*?&. Only letters,
digits and those special characters are allowed.
"""

import re

from .exceptions import PasswordPolicyViolation

MIN_LENGTH = 8
# bcrypt only accepts passwords up to 72 bytes
MAX_BYTES = 72

_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[a-z]"), "密碼必須包含至少一個小寫字母"),
    (re.compile(r"[A-Z]"), "密碼必須包含至少一個大寫字母"),
    (re.compile(r"\d"), "密碼必須包含至少一個數字"),
    (re.compile(r"[@$!%*?&]"), "密碼必須包含至少一個特殊字元 (@$!%*?&)"),
]


def password_policy_errors(password: str) -> list[str]:
    """Return a message for every policy rule the password breaks."""
    errors = []
    if len(password) < MIN_LENGTH:
        errors.append(f"密碼長度至少需要 {MIN_LENGTH} 個字元")
    if len(password.encode()) > MAX_BYTES:
        errors.append(f"密碼長度不可超過 {MAX_BYTES} 個字元")
    for pattern, message in _RULES:
        if not pattern.search(password):
            errors.append(message)
    if re.search(r"[^A-Za-z\d@$!%*?&]", password):
        errors.append("密碼只能包含英文字母、數字與 @$!%*?&")
    return errors


def validate_password(password: str, confirmation: str | None = None) -> None:
    """
    Enforce the password policy.

    Raises:
        PasswordPolicyViolation: If any rule is broken or the confirmation
            differs from the password
    """
    errors = password_policy_errors(password)
    if confirmation is not None and confirmation != password:
        errors.append("密碼確認不一致")
    if errors:
        raise PasswordPolicyViolation(errors)
