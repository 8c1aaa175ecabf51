"""
Error taxonomy shared by every blueprint.

Each error carries the HTTP status it maps to and a message that is safe
to show to the caller. Internal details stay in the server log.
"""

import math

from flask import jsonify


class MailcollectError(Exception):
    status_code = 500
    default_message = 'An unexpected error occurred'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MailcollectError):
    status_code = 400
    default_message = 'Invalid request'


class AuthError(MailcollectError):
    status_code = 401
    default_message = 'Unauthorized access'


class ConflictError(MailcollectError):
    status_code = 409
    default_message = 'Resource already exists'


class DuplicateSubscriberError(ConflictError):
    default_message = 'This email is already subscribed to our newsletter'


class RateLimitError(MailcollectError):
    status_code = 429
    default_message = 'Too many email submissions from this IP, please try again later.'

    def __init__(self, message=None, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


class DispatchError(MailcollectError):
    status_code = 500
    default_message = 'Failed to send email'


class ConfigError(MailcollectError):
    """Startup misconfiguration. Never rendered to a client."""
    default_message = 'Invalid configuration'


def error_response(error):
    """Render a MailcollectError as the API's {success, message} shape."""
    response = jsonify({'success': False, 'message': error.message})
    response.status_code = error.status_code
    retry_after = getattr(error, 'retry_after', None)
    if retry_after is not None:
        response.headers['Retry-After'] = str(math.ceil(retry_after))
    return response
