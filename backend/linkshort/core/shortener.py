import secrets
import string


# Base62, case-sensitive
CHARSET = string.ascii_letters + string.digits  # A-Za-z0-9

CUSTOM_CODE_CHARSET = set(CHARSET + "-_")

# Paths the public redirect route must never shadow
RESERVED_CODES = {
    'api', 'admin', 'static', 'www', 'app', 'docs', 'redoc',
    'openapi', 'health', 'status', 'login', 'logout', 'auth',
    '404', 'expired', 'error', 'dashboard', 'register',
}


def generate_short_code(length: int = 6) -> str:
    """
    Generate a random short code.

    Each character is drawn uniformly from the 62-character alphanumeric
    alphabet. Uniqueness is the caller's concern: the code is checked
    against the link store at creation time.

    Note:
        - 6 chars: 62^6 = 56,800,235,584 combinations
    """
    return ''.join(secrets.choice(CHARSET) for _ in range(length))


def validate_custom_code(code: str) -> tuple[bool, str]:
    """
    Validate a user-chosen short code.

    Args:
        code: The requested code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not code:
        return False, "Custom code cannot be empty"

    if len(code) < 3:
        return False, "Custom code must be at least 3 characters"

    if len(code) > 20:
        return False, "Custom code must be at most 20 characters"

    if not all(c in CUSTOM_CODE_CHARSET for c in code):
        return False, "Custom code can only contain letters, digits, hyphens, and underscores"

    if code.startswith('-') or code.endswith('-'):
        return False, "Custom code cannot start or end with a hyphen"

    if code.lower() in RESERVED_CODES:
        return False, f"'{code}' is a reserved word and cannot be used"

    return True, ""
