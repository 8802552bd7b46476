# src/chainlog/utils/sanitizer.py
"""
Ready-made redaction rules.

SENSITIVE_KEYS feeds key redaction (Logger.with_keys_to_redact), the
patterns feed pattern redaction (Logger.with_redactor). Every shipped
pattern is idempotent: running it on its own output changes nothing.
"""

import re
from typing import FrozenSet, List, Tuple

from ..core.redactor import REDACTED, Redactor


# Field names whose values are always secrets (matched case-insensitively)
SENSITIVE_KEYS: FrozenSet[str] = frozenset({
    # Passwords
    'password', 'passwd', 'pwd', 'pass',
    # Tokens
    'token', 'access_token', 'refresh_token', 'auth_token', 'api_token', 'bearer_token',
    'jwt', 'jwt_token', 'id_token',
    # Secrets
    'secret', 'api_secret', 'client_secret', 'secret_key', 'shared_secret',
    # API keys
    'api_key', 'apikey', 'private_key', 'encryption_key',
    # Authentication
    'authorization', 'auth', 'authentication',
    # Sessions and cookies
    'cookie', 'session', 'sessionid', 'session_id', 'csrf_token', 'xsrf_token',
    # Payments
    'credit_card', 'creditcard', 'card_number', 'cvv', 'cvc', 'card_cvv',
    'ssn', 'social_security',
    # One-time codes
    'otp', 'one_time_password', 'totp', 'mfa_code', 'pin', 'pin_code', 'security_code',
    'db_password', 'database_password', 'smtp_password', 'ssh_key',
})

# (pattern, replacement) pairs
SENSITIVE_PATTERNS: List[Tuple[str, str]] = [
    # 13 to 16 digit card numbers, optionally grouped by spaces or dashes
    (r'\b\d(?:[ -]?\d){12,15}\b', REDACTED),
    # Bearer tokens in headers
    (r'(?i)(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', r'\1' + REDACTED),
    # Basic auth in headers
    (r'(?i)(Basic\s+)([A-Za-z0-9+/]+=*)', r'\1' + REDACTED),
    # key=value or key: value pairs
    (r'(?i)(api[_-]?key[\s:=]+)([^\s&,;]+)', r'\1' + REDACTED),
    (r'(?i)(token[\s:=]+)([^\s&,;]+)', r'\1' + REDACTED),
    (r'(?i)(password[\s:=]+)([^\s&,;]+)', r'\1' + REDACTED),
]

EMAIL_PATTERN = r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}'


def credit_card_redactor() -> Redactor:
    """Redactor for card-like digit runs."""
    pattern, replacement = SENSITIVE_PATTERNS[0]
    return Redactor(pattern, replacement)


def email_redactor() -> Redactor:
    """Redactor for e-mail addresses (not part of default_redactors())."""
    return Redactor(EMAIL_PATTERN)


def default_redactors() -> List[Redactor]:
    """
    Redactors for all SENSITIVE_PATTERNS.

    Example:
        >>> log = Logger.create("app").with_redactor(*default_redactors())
        >>> log.info("calling with api_key=abc123")  # msg: "calling with api_key=REDACTED"
    """
    return [Redactor(pattern, replacement) for pattern, replacement in SENSITIVE_PATTERNS]


def is_sensitive_key(key: str) -> bool:
    """Exact, case-insensitive check against SENSITIVE_KEYS."""
    return key.lower() in SENSITIVE_KEYS


def sensitive_pattern(*extra_keys: str) -> str:
    """
    Regex matching `key=value` pairs for the given field names.

    Example:
        >>> Redactor(sensitive_pattern("ssn"), r"\\1" + REDACTED).redact("ssn=123-45-6789")
        ('ssn=REDACTED', True)
    """
    names = "|".join(re.escape(k) for k in extra_keys)
    return rf'(?i)((?:{names})[\s:=]+)([^\s&,;]+)'
