from flask import request, jsonify

from mailcollect.core.errors import MailcollectError, ValidationError, error_response
from mailcollect.core.logging_service import LoggingService
from mailcollect.core.security import get_services, rate_limited
from mailcollect.core.validation import validate_email
from . import contact_bp

DEFAULT_SUBJECT = 'New Contact Form Submission'
MAX_MESSAGE_LENGTH = 5000


def _clean(value):
    return value.strip() if isinstance(value, str) else ''


@contact_bp.route('/contact', methods=['POST'])
@rate_limited
def contact():
    """Send a contact-form submission to the admin recipients"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        name = _clean(data.get('name'))
        email = _clean(data.get('email'))
        message = _clean(data.get('message'))
        subject = _clean(data.get('subject')) or DEFAULT_SUBJECT

        if not name or not email or not message:
            raise ValidationError('Name, email, and message are required')

        if not validate_email(email):
            raise ValidationError('Please provide a valid email address')

        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f'Message must be {MAX_MESSAGE_LENGTH} characters or fewer')

        get_services().email_service.send_contact_notification(name, email, subject, message)

    except ValidationError as e:
        return error_response(e)
    except Exception as e:
        LoggingService.log_error_with_traceback('contact', e)
        return error_response(MailcollectError('Failed to send message. Please try again later.'))

    LoggingService.info('contact', f"Contact message forwarded from: {email}")
    return jsonify({
        'success': True,
        'message': "Thank you for your message! We'll get back to you soon.",
    }), 200
