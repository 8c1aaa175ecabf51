"""
Email Service Module
====================

Sends the service's transactional emails through SMTP (e.g. Gmail) or Resend.
Provider is selected via EMAIL_PROVIDER config ('smtp' or 'resend').
Branding is configurable through Flask app config.

Every send either succeeds or raises DispatchError; dispatch_all() sends a
batch concurrently and fails as soon as any message fails.
"""

import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Iterable, List, Optional

import resend

from mailcollect.core.errors import DispatchError

logger = logging.getLogger(__name__)


class MailMessage:
    """One outgoing email: sender, recipients, subject and bodies."""

    def __init__(self, sender: str, to: Iterable[str], subject: str,
                 html_body: str, text_body: Optional[str] = None):
        self.sender = sender
        self.to = [to] if isinstance(to, str) else list(to)
        self.subject = subject
        self.html_body = html_body
        self.text_body = text_body

    def __repr__(self):
        return f"<MailMessage to={self.to} subject={self.subject!r}>"


class EmailService:
    """
    Configurable email service supporting SMTP and Resend.

    Configuration (set in Flask app.config):
        EMAIL_PROVIDER: 'smtp' (default) or 'resend'
        EMAIL_USER: Mail account login, also the default sender
        EMAIL_PASS: SMTP password/app password (required if provider is 'smtp')
        EMAIL_HOST: SMTP server host (default: 'smtp.gmail.com')
        EMAIL_PORT: SMTP server port (default: 587, 465 uses implicit TLS)
        EMAIL_TIMEOUT: SMTP socket timeout in seconds (default: 30)
        RESEND_API_KEY: Resend API key (required if provider is 'resend')
        EMAIL_ADDRESS: Sender address (default: EMAIL_USER)
        EMAIL_ADMIN_RECIPIENTS: Addresses that get admin/contact notifications (default: [EMAIL_USER])
        EMAIL_BRAND_NAME, EMAIL_BRAND_TAGLINE, EMAIL_WEBSITE_URL, EMAIL_CONTACT_URL: branding
    """

    def __init__(self, app=None):
        self.provider = 'smtp'
        self.sender_email = None
        self.admin_recipients = []
        self.smtp_user = None
        self.smtp_password = None
        self.smtp_host = 'smtp.gmail.com'
        self.smtp_port = 587
        self.smtp_timeout = 30
        self.api_key = None
        self.brand_name = 'TOA Creatives'
        self.brand_tagline = ''
        self.website_url = 'https://toacreatives.com'
        self.contact_url = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.provider = (app.config.get('EMAIL_PROVIDER') or 'smtp').lower()
        logger.info(f"Initializing email service (provider: {self.provider})")

        self.smtp_user = app.config.get('EMAIL_USER')
        self.sender_email = app.config.get('EMAIL_ADDRESS') or self.smtp_user
        recipients = app.config.get('EMAIL_ADMIN_RECIPIENTS')
        if isinstance(recipients, str):
            recipients = [item.strip() for item in recipients.split(',') if item.strip()]
        self.admin_recipients = list(recipients or ([self.smtp_user] if self.smtp_user else []))

        self.brand_name = app.config.get('EMAIL_BRAND_NAME', self.brand_name)
        self.brand_tagline = app.config.get('EMAIL_BRAND_TAGLINE', '')
        self.website_url = app.config.get('EMAIL_WEBSITE_URL', self.website_url)
        self.contact_url = app.config.get('EMAIL_CONTACT_URL')

        logger.info(f"Email config: user={self.smtp_user}, "
                    f"pass={'***' if app.config.get('EMAIL_PASS') else 'NOT SET'}")

        if self.provider == 'resend':
            self._init_resend(app)
        else:
            self._init_smtp(app)

    def _init_resend(self, app):
        """Initialize Resend provider"""
        self.api_key = app.config.get('RESEND_API_KEY')
        if not self.api_key:
            logger.warning("RESEND_API_KEY not configured - email sending disabled")
            return
        resend.api_key = self.api_key
        logger.info("Resend API client initialized")

    def _init_smtp(self, app):
        """Initialize SMTP provider (e.g. Gmail)"""
        self.smtp_host = app.config.get('EMAIL_HOST', 'smtp.gmail.com')
        self.smtp_port = int(app.config.get('EMAIL_PORT', 587))
        self.smtp_timeout = float(app.config.get('EMAIL_TIMEOUT', 30))
        self.smtp_password = app.config.get('EMAIL_PASS')

        if not self.smtp_password:
            logger.warning("EMAIL_PASS not configured - SMTP email sending disabled")
            return

        logger.info(f"SMTP configured: {self.smtp_host}:{self.smtp_port}")

    # ==================== Sending ====================

    def send(self, message: MailMessage) -> None:
        """Hand one message to the configured provider. Raises DispatchError on failure."""
        if not message.to:
            raise DispatchError("No recipients provided")
        if not message.sender:
            raise DispatchError("Sender email not configured")

        logger.info(f"Sending email from: {message.sender} to: {', '.join(message.to)}")
        logger.info(f"Subject: {message.subject}")

        try:
            if self.provider == 'resend':
                self._send_via_resend(message)
            else:
                self._send_via_smtp(message)
        except DispatchError:
            raise
        except Exception as e:
            logger.error(f"Error sending to {message.to}: {e}")
            raise DispatchError(str(e)) from e

    def dispatch_all(self, messages: List[MailMessage]) -> None:
        """Send messages concurrently; return when all succeeded, raise on the first failure."""
        if not messages:
            return

        pool = ThreadPoolExecutor(max_workers=len(messages), thread_name_prefix='mailcollect-send')
        try:
            futures = [pool.submit(self.send, message) for message in messages]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    raise future.exception()
        finally:
            # Sends still in flight after a failure finish in the background
            pool.shutdown(wait=False, cancel_futures=True)

    def _send_via_resend(self, message: MailMessage) -> None:
        """Send a single email via Resend API"""
        if not self.api_key:
            raise DispatchError("Resend API key not configured")

        params = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html_body,
        }
        if message.text_body:
            params["text"] = message.text_body

        r = resend.Emails.send(params)
        if not r or not r.get('id'):
            raise DispatchError(f"Resend error: {r}")
        logger.debug(f"Resend accepted email, ID: {r['id']}")

    def _send_via_smtp(self, message: MailMessage) -> None:
        """Send a single email via SMTP (e.g. Gmail)"""
        if not self.smtp_password:
            raise DispatchError("SMTP password not configured")

        msg = MIMEMultipart('alternative')
        msg['From'] = message.sender
        msg['To'] = ', '.join(message.to)
        msg['Subject'] = message.subject

        if message.text_body:
            msg.attach(MIMEText(message.text_body, 'plain', 'utf-8'))
        msg.attach(MIMEText(message.html_body, 'html', 'utf-8'))

        if self.smtp_port == 465:
            server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout)
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout)

        with server:
            if self.smtp_port != 465:
                server.starttls()
            server.login(self.smtp_user or message.sender, self.smtp_password)
            server.send_message(msg)

        logger.info(f"SMTP email sent to {msg['To']}")

    # ==================== Subscriptions ====================

    def send_subscription_emails(self, record, total_subscribers: int) -> None:
        """Admin notification and subscriber confirmation, sent together"""
        self.dispatch_all([
            self.build_admin_subscriber_notification(record, total_subscribers),
            self.build_subscriber_confirmation(record),
        ])

    def build_admin_subscriber_notification(self, record, total_subscribers: int) -> MailMessage:
        subject = f"New Newsletter Subscription - {self.brand_name}"
        subscribed_at = record.subscribed_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()

        html_body = self._get_admin_subscriber_template(
            escape(record.name), escape(record.email), subscribed_at, total_subscribers
        )
        text_body = f"""
NEW NEWSLETTER SUBSCRIPTION

- Name: {record.name}
- Email: {record.email}
- Subscribed at: {subscribed_at}
- Total Subscribers: {total_subscribers}

---
{self.brand_name}
        """
        return MailMessage(self.sender_email, self.admin_recipients, subject, html_body, text_body)

    def _get_admin_subscriber_template(self, name, email, subscribed_at, total_subscribers):
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9;">
            {self._header('New Newsletter Subscription!', 24)}
            <div style="background: white; padding: 30px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1);">
                <h2 style="color: #333; margin-top: 0;">Subscription Details</h2>
                <p><strong>Name:</strong> {name}</p>
                <p><strong>Email:</strong> {email}</p>
                <p><strong>Subscribed at:</strong> {subscribed_at}</p>
                <p><strong>Total Subscribers:</strong> {total_subscribers}</p>
            </div>
            {self._footer()}
        </div>
        """

    def build_subscriber_confirmation(self, record) -> MailMessage:
        subject = f"Welcome to {self.brand_name} Newsletter!"
        html_body = self._get_confirmation_template(escape(record.name))
        text_body = f"""
Hi {record.name},

Thank you for subscribing to the {self.brand_name} newsletter!
Stay tuned for updates, creative inspiration and new projects.

You're receiving this email because you subscribed at {self.website_url}
        """
        return MailMessage(self.sender_email, [record.email], subject, html_body, text_body)

    def _get_confirmation_template(self, name):
        contact_block = ''
        if self.contact_url:
            contact_block = f"""
            <div style="background: #ffeb3b; padding: 20px; border-radius: 10px; margin-top: 20px; text-align: center;">
                <h3 style="color: #333; margin-top: 0;">Ready to get started?</h3>
                <p style="color: #555; margin-bottom: 20px;">Let's discuss how we can help transform your brand!</p>
                <a href="{escape(self.contact_url)}" style="background: #25D366; color: white; padding: 12px 24px; border-radius: 25px; text-decoration: none; font-weight: bold; display: inline-block;">Chat with us</a>
            </div>
            """

        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9;">
            {self._header(f'Welcome to {escape(self.brand_name)}!', 28)}
            <div style="background: white; padding: 30px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1);">
                <h2 style="color: #333; margin-top: 0;">Thank you for subscribing!</h2>
                <p>Hi {name},</p>
                <p>Welcome to our creative community! Here is what to expect:</p>
                <ul style="color: #555; line-height: 1.6;">
                    <li>The latest design trends and insights</li>
                    <li>Marketing tips and strategies</li>
                    <li>Our latest projects and case studies</li>
                    <li>Exclusive business growth resources</li>
                </ul>
                <p>Stay tuned for updates and creative inspiration delivered straight to your inbox!</p>
            </div>
            {contact_block}
            <div style="text-align: center; margin-top: 20px; padding: 15px; color: #666; font-size: 14px;">
                <p style="font-size: 12px; color: #999;">
                    You're receiving this email because you subscribed to our newsletter at {escape(self.website_url)}
                </p>
            </div>
        </div>
        """

    # ==================== Contact Form ====================

    def send_contact_notification(self, name: str, email: str, subject: str, message: str) -> None:
        self.send(self.build_contact_notification(name, email, subject, message))

    def build_contact_notification(self, name: str, email: str, subject: str,
                                   message: str) -> MailMessage:
        submitted_at = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')

        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9;">
            {self._header('New Contact Form Submission', 24)}
            <div style="background: white; padding: 30px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1);">
                <h2 style="color: #333; margin-top: 0;">Contact Details</h2>
                <p><strong>Name:</strong> {escape(name)}</p>
                <p><strong>Email:</strong> {escape(email)}</p>
                <p><strong>Subject:</strong> {escape(subject)}</p>
                <p><strong>Message:</strong></p>
                <div style="background: #f5f5f5; padding: 15px; border-radius: 5px; margin-top: 10px;">
                    <p style="margin: 0; line-height: 1.6; white-space: pre-wrap;">{escape(message)}</p>
                </div>
                <p><strong>Submitted at:</strong> {submitted_at}</p>
            </div>
            {self._footer()}
        </div>
        """

        text_body = f"""
NEW CONTACT FORM SUBMISSION

- Name: {name}
- Email: {email}
- Subject: {subject}
- Submitted at: {submitted_at}

{message}
        """

        return MailMessage(self.sender_email, self.admin_recipients,
                           f"{subject} - {self.brand_name}", html_body, text_body)

    # ==================== Shared pieces ====================

    def _header(self, title, font_size):
        tagline = f"{escape(self.brand_name)} - {escape(self.brand_tagline)}" if self.brand_tagline else escape(self.brand_name)
        return f"""
            <div style="background: linear-gradient(135deg, #ff6b35 0%, #f7931e 50%, #ff1744 100%); padding: 30px; border-radius: 10px; color: white; text-align: center; margin-bottom: 20px;">
                <h1 style="margin: 0; font-size: {font_size}px;">{title}</h1>
                <p style="margin: 10px 0 0 0; opacity: 0.9;">{tagline}</p>
            </div>
        """

    def _footer(self):
        return f"""
            <div style="text-align: center; margin-top: 20px; padding: 20px; background: white; border-radius: 10px;">
                <p style="color: #666; margin: 0;">This email was sent from your {escape(self.brand_name)} website.</p>
            </div>
        """
