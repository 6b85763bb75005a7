"""
Rate limiting configuration.

The Limiter instance is created in tracker/__init__.py with no default
limits; this module applies limits per blueprint once they are registered.

Usage:
    from tracker.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_LIMIT = "10 per minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Auth endpoints:   LOGIN_RATE_LIMIT (password guessing)
        - Health check:     exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    login_limit = app.config.get("LOGIN_RATE_LIMIT") or DEFAULT_LOGIN_LIMIT
    bp = app.blueprints.get("auth")
    if bp:
        limiter.limit(login_limit)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: auth %s, health exempt", login_limit)
