"""
Request-level guards: client identity, rate limiting and the admin secret.
"""

import hmac
from functools import wraps

from flask import current_app, request

from .errors import RateLimitError, error_response
from .logging_service import LoggingService


def get_services():
    """The Mailcollect extension registered on the current app"""
    return current_app.extensions['mailcollect']


def get_client_ip():
    """Get client IP address from request (proxy headers only when trusted)"""
    if current_app.config.get('TRUST_PROXY_HEADERS'):
        if request.headers.get('X-Forwarded-For'):
            return request.headers.get('X-Forwarded-For').split(',')[0].strip()
        if request.headers.get('X-Real-IP'):
            return request.headers.get('X-Real-IP').strip()
    return request.remote_addr or 'unknown'


def rate_limited(f):
    """Decorator that runs the shared write-endpoint rate limiter before the view"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        limiter = get_services().rate_limiter
        client_ip = get_client_ip()
        if not limiter.allow(client_ip):
            LoggingService.log_security_event(
                'Rate limit exceeded', {'endpoint': request.path, 'source': client_ip}
            )
            return error_response(RateLimitError(retry_after=limiter.retry_after(client_ip)))
        return f(*args, **kwargs)
    return decorated_function


def is_valid_admin_key(provided):
    """Constant-time check of a caller-supplied admin secret.

    An unset ADMIN_KEY never matches, including an absent key.
    """
    expected = current_app.config.get('ADMIN_KEY')
    if not expected or not provided or not isinstance(provided, str):
        return False
    return hmac.compare_digest(provided.encode(), str(expected).encode())
