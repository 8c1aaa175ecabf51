"""
Email Module
============

Transactional email sending over SMTP or Resend: subscription
notifications, subscriber confirmations and contact-form messages.
"""

from .email_service import EmailService, MailMessage

__all__ = ['EmailService', 'MailMessage']
