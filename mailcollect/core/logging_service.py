"""
Centralized logging service for mailcollect.
Structured log lines with request context, written through the standard
logging module so they land wherever the host process sends its logs.
"""

import json
import logging
import traceback

from flask import request, has_request_context

_base_logger = logging.getLogger('mailcollect')


def configure_logging(level='INFO'):
    """Set up a stream handler on the package logger (once) at the given level"""
    if not _base_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        ))
        _base_logger.addHandler(handler)
    _base_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.remote_addr
        user_agent = request.headers.get('User-Agent', '')
        request_path = f"{request.method} {request.path}"
        return ip_address, user_agent, request_path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message with request context

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (subscribers, contact, admin, etc.)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        ip_address, user_agent, request_path = LoggingService._get_request_context()

        if isinstance(details, dict):
            details = json.dumps(details, default=str)

        parts = [f"[{source}] {message}"]
        if request_path:
            parts.append(f"path={request_path} ip={ip_address} ua={user_agent[:100]!r}")
        if details:
            parts.append(f"details={details}")

        logging.getLogger(f'mailcollect.{source}').log(
            getattr(logging, level.upper(), logging.INFO), ' | '.join(parts)
        )

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events"""
        LoggingService.warning('security', message, details)
