"""
mailcollect - Newsletter & Contact Email Service
================================================

A small Flask service that:
- Collects newsletter subscriptions (deduplicated, in memory)
- Forwards contact-form messages to the admin inbox
- Sends transactional emails over SMTP or Resend
- Rate limits the write endpoints per client address
- Exposes the subscriber list behind a shared admin secret

Usage:
    from mailcollect import create_app

    app = create_app()
    app.run(port=app.config['PORT'])
"""

import logging
import time

from flask import Flask, jsonify, request
from flask_cors import CORS

from .core.config import Config
from .core.errors import ConfigError, MailcollectError, error_response
from .core.logging_service import configure_logging, LoggingService
from .core.rate_limit import RateLimiter
from .modules.contact import contact_bp
from .modules.dashboard import dashboard_bp
from .modules.email import EmailService
from .modules.ops import ops_bp
from .modules.subscribers import subscribers_bp, SubscriberStore

__version__ = '0.1.0'

logger = logging.getLogger(__name__)


class Mailcollect:
    """
    Flask extension holding the per-process services.

    The store, rate limiter and email service are created once per app and
    reached from views through current_app.extensions['mailcollect'].
    Pass your own instances to swap in test doubles or another backend.
    """

    def __init__(self, app=None, store=None, rate_limiter=None, email_service=None):
        self.store = store
        self.rate_limiter = rate_limiter
        self.email_service = email_service
        self.started_at = time.monotonic()

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        # Refuse to build an app that cannot send mail
        try:
            Config.validate_mail_credentials(app.config)
        except ConfigError as e:
            logger.critical(f"Startup aborted: {e.message}")
            raise

        if self.store is None:
            self.store = SubscriberStore()
        if self.rate_limiter is None:
            self.rate_limiter = RateLimiter(
                max_requests=int(app.config.get('RATE_LIMIT_MAX', 5)),
                window=int(app.config.get('RATE_LIMIT_WINDOW', 15 * 60)),
            )
        if self.email_service is None:
            self.email_service = EmailService(app)

        app.extensions['mailcollect'] = self

        self._setup_cors(app)
        self._register_blueprints(app)
        self._register_error_handlers(app)

    def _setup_cors(self, app):
        origins = app.config.get('CORS_ORIGINS') or '*'
        if isinstance(origins, str) and origins != '*':
            origins = [o.strip() for o in origins.split(',') if o.strip()]
        CORS(app, resources={r"/api/*": {"origins": origins}})

    def _register_blueprints(self, app):
        for blueprint in (ops_bp, subscribers_bp, contact_bp, dashboard_bp):
            app.register_blueprint(blueprint)
        logger.debug(f"Registered blueprints: {sorted(app.blueprints)}")

    def _register_error_handlers(self, app):
        @app.errorhandler(404)
        def not_found(error):
            if request.path.startswith('/api'):
                return jsonify({'success': False, 'message': 'Not found'}), 404
            return error

        @app.errorhandler(405)
        def method_not_allowed(error):
            if request.path.startswith('/api'):
                return jsonify({'success': False, 'message': 'Method not allowed'}), 405
            return error

        @app.errorhandler(MailcollectError)
        def handle_mailcollect_error(error):
            return error_response(error)

        @app.errorhandler(500)
        def internal_error(error):
            LoggingService.error('app', f"Unhandled error on {request.path}",
                                 {'error': str(getattr(error, 'original_exception', error))})
            return jsonify({'success': False, 'message': 'An unexpected error occurred'}), 500


def create_app(config=None, *, store=None, rate_limiter=None, email_service=None):
    """
    Build the Flask app.

    Args:
        config: dict of overrides applied on top of Config (environment)
        store: SubscriberStore to use instead of a fresh in-memory one
        rate_limiter: RateLimiter to use instead of one built from config
        email_service: object with send_subscription_emails() and
            send_contact_notification(), used instead of EmailService

    Raises:
        ConfigError: mail credentials are missing
    """
    overrides = dict(config or {})
    static_folder = overrides.get('STATIC_FOLDER', Config.STATIC_FOLDER)

    app = Flask(
        __name__,
        static_folder=static_folder or None,
        static_url_path='' if static_folder else None,
    )
    app.config.from_object(Config)
    app.config.update(overrides)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    Mailcollect(app, store=store, rate_limiter=rate_limiter, email_service=email_service)
    logger.info(f"mailcollect ready (port {app.config['PORT']}, "
                f"provider {app.config.get('EMAIL_PROVIDER')})")
    return app


__all__ = ['create_app', 'Mailcollect', 'Config', '__version__']
