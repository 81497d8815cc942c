"""
Rate limiting configuration.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from cendre.core.config import Settings, settings

# Create limiter instance
limiter = Limiter(key_func=get_remote_address)

# Rate limit configurations
# Format: "count/period" where period can be second(s), minute(s), hour(s), day(s)
_limits = {"secrets": settings.SECRETS_RATE_LIMIT}


def configure_limiter(config: Settings) -> None:
    """Apply the rate limit of the app being built."""
    _limits["secrets"] = config.SECRETS_RATE_LIMIT


def secrets_limit() -> str:
    """Create and retrieve share one budget per client."""
    return _limits["secrets"]


def rate_limit_disabled(request: Request) -> bool:
    settings_for_app = getattr(request.app.state, "settings", settings)
    return not settings_for_app.RATE_LIMIT_ENABLED
