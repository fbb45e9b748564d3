import ipaddress
import re
from urllib.parse import urlparse

DOMAIN_PATTERN = re.compile(
    r'^(?=.{1,253}$)(?!-)[a-z0-9-]{1,63}(?<!-)(\.(?!-)[a-z0-9-]{1,63}(?<!-))*\.[a-z]{2,63}$'
)


def _is_internal_host(host: str) -> bool:
    if host in ('localhost', 'localhost.localdomain') or host.endswith('.localhost'):
        return True
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified


def is_valid_url(url: str) -> tuple[bool, str]:
    """
    Validate if a URL is valid and safe to redirect to.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "Original URL is required"

    if len(url) > 2048:
        return False, "URL is too long (max 2048 characters)"

    try:
        result = urlparse(url)
        host = result.hostname
    except ValueError:
        return False, "Invalid URL format"

    # Must have scheme and host
    if not result.scheme or not host:
        return False, "Invalid URL format"

    # Only http and https
    if result.scheme not in ['http', 'https']:
        return False, "Only HTTP and HTTPS URLs are allowed"

    if _is_internal_host(host.lower()):
        return False, "Internal/private URLs are not allowed"

    return True, ""


def normalize_domain(domain: str) -> str:
    """Lowercase a domain and strip scheme, path and trailing dot"""
    domain = (domain or '').strip().lower()
    if '://' in domain:
        domain = urlparse(domain).hostname or ''
    return domain.split('/')[0].rstrip('.')


def is_valid_domain(domain: str) -> tuple[bool, str]:
    if not domain:
        return False, "Domain is required"

    if not DOMAIN_PATTERN.match(domain):
        return False, "Invalid domain format"

    if _is_internal_host(domain):
        return False, "Internal domains are not allowed"

    return True, ""


def get_client_ip(request) -> str:
    """
    Get client IP address from request.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address
    """
    # Edge proxy sets the real visitor address
    connecting = request.headers.get("cf-connecting-ip")
    if connecting:
        return connecting.strip()

    # Check for X-Forwarded-For header (if behind proxy)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    # Otherwise use client.host
    return request.client.host if request.client else "unknown"
