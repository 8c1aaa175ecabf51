"""
mailcollect Core
================

Config, errors, validation, rate limiting and logging shared by the modules.
"""

from .config import Config
from .errors import (
    MailcollectError, ValidationError, AuthError, ConflictError,
    DuplicateSubscriberError, RateLimitError, DispatchError, ConfigError,
    error_response,
)
from .logging_service import LoggingService, configure_logging
from .rate_limit import RateLimiter
from .validation import validate_email

__all__ = [
    'Config', 'MailcollectError', 'ValidationError', 'AuthError', 'ConflictError',
    'DuplicateSubscriberError', 'RateLimitError', 'DispatchError', 'ConfigError',
    'error_response', 'LoggingService', 'configure_logging',
    'RateLimiter', 'validate_email',
]
