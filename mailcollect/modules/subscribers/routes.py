"""
Subscribers Routes
==================

Subscribe flow: rate limit -> validate -> dedup -> insert -> send the admin
notification and the subscriber confirmation together -> respond.

The record is written before any email goes out. If sending fails the
caller gets a 500 but the subscription stays, and a retry with the same
address is rejected as a duplicate.
"""

import logging

from flask import request, jsonify

from mailcollect.core.errors import (
    MailcollectError, ValidationError, DuplicateSubscriberError, AuthError,
    error_response,
)
from mailcollect.core.logging_service import LoggingService
from mailcollect.core.security import get_services, rate_limited, is_valid_admin_key
from mailcollect.core.validation import validate_email
from . import subscribers_bp
from .store import SubscriberRecord, DEFAULT_NAME

logger = logging.getLogger(__name__)

SUBSCRIBE_FAILED = 'Failed to process subscription. Please try again later.'


def _get_json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ===================
# PUBLIC API ROUTES
# ===================

@subscribers_bp.route('/subscribe', methods=['POST'])
@rate_limited
def subscribe():
    """Handle new subscription requests"""
    services = get_services()
    store = services.store
    data = _get_json_body()

    try:
        email = data.get('email')
        if not isinstance(email, str) or not email.strip():
            raise ValidationError('Email is required')

        if not validate_email(email):
            raise ValidationError('Please provide a valid email address')

        name = data.get('name')
        name = name.strip() if isinstance(name, str) else ''

        record = SubscriberRecord(email, name or DEFAULT_NAME)
        if store.has(record.email):
            raise DuplicateSubscriberError()

        # insert() re-checks under the store lock, a concurrent twin still gets 409
        total = store.insert(record)

    except MailcollectError as e:
        logger.info(f"Subscription rejected ({e.status_code}): {e.message}")
        return error_response(e)
    except Exception as e:
        LoggingService.log_error_with_traceback('subscribers', e)
        return error_response(MailcollectError(SUBSCRIBE_FAILED))

    LoggingService.info('subscribers', f"New subscription added: {record.email}", {'total': total})

    try:
        services.email_service.send_subscription_emails(record, total)
    except Exception as e:
        LoggingService.log_error_with_traceback(
            'subscribers', e, {'email': record.email, 'note': 'subscriber kept'}
        )
        return error_response(MailcollectError(SUBSCRIBE_FAILED))

    return jsonify({
        'success': True,
        'message': 'Successfully subscribed! Check your email for confirmation.',
        'totalSubscribers': total,
    }), 200


@subscribers_bp.route('/subscribers/count', methods=['GET'])
def get_subscriber_count():
    """Get subscriber count"""
    return jsonify({
        'success': True,
        'count': get_services().store.count(),
    }), 200


# ===================
# ADMIN ROUTES
# ===================

@subscribers_bp.route('/subscribers', methods=['GET'])
def list_subscribers():
    """Full subscriber list (x-admin-key header required)"""
    if not is_valid_admin_key(request.headers.get('x-admin-key')):
        LoggingService.log_security_event('Rejected admin key on subscriber list')
        return error_response(AuthError())

    subscribers = [record.to_dict() for record in get_services().store.all()]
    return jsonify({
        'success': True,
        'subscribers': subscribers,
        'count': len(subscribers),
    }), 200
