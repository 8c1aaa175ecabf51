import os
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default=None):
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """
    Base configuration for mailcollect.
    Every value can be set through the environment (or a .env file) and
    overridden per app by passing a dict to create_app().
    """
    # Mail account used to send everything
    EMAIL_USER = os.getenv('EMAIL_USER')
    EMAIL_PASS = os.getenv('EMAIL_PASS')

    # 'smtp' (Gmail by default) or 'resend'
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'smtp')
    EMAIL_HOST = os.getenv('EMAIL_HOST', 'smtp.gmail.com')
    EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))
    EMAIL_TIMEOUT = float(os.getenv('EMAIL_TIMEOUT', '30'))
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')

    # Sender and admin recipients fall back to EMAIL_USER when unset
    EMAIL_ADDRESS = os.getenv('EMAIL_ADDRESS')
    EMAIL_ADMIN_RECIPIENTS = _env_list('EMAIL_ADMIN_RECIPIENTS')

    # Branding for templates and status messages
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'TOA Creatives')
    EMAIL_BRAND_TAGLINE = os.getenv('EMAIL_BRAND_TAGLINE', 'The Oasis of Awesomeness')
    EMAIL_WEBSITE_URL = os.getenv('EMAIL_WEBSITE_URL', 'https://toacreatives.com')
    EMAIL_CONTACT_URL = os.getenv('EMAIL_CONTACT_URL', 'https://wa.me/2348100876959')

    # Shared secret for /api/subscribers and /admin
    ADMIN_KEY = os.getenv('ADMIN_KEY')

    # Write endpoints: RATE_LIMIT_MAX requests per RATE_LIMIT_WINDOW seconds per source
    RATE_LIMIT_MAX = int(os.getenv('RATE_LIMIT_MAX', '5'))
    RATE_LIMIT_WINDOW = int(os.getenv('RATE_LIMIT_WINDOW', str(15 * 60)))
    TRUST_PROXY_HEADERS = _env_bool('TRUST_PROXY_HEADERS')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    STATIC_FOLDER = os.getenv('STATIC_FOLDER')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    PORT = int(os.getenv('PORT', '5000'))

    @staticmethod
    def validate_mail_credentials(config):
        """Raise ConfigError unless the configured provider has both credentials."""
        provider = (config.get('EMAIL_PROVIDER') or 'smtp').lower()
        if provider not in ('smtp', 'resend'):
            raise ConfigError(f"Unknown EMAIL_PROVIDER: {provider}")

        secret_key = 'RESEND_API_KEY' if provider == 'resend' else 'EMAIL_PASS'
        missing = [key for key in ('EMAIL_USER', secret_key) if not config.get(key)]
        if missing:
            raise ConfigError(
                f"Email credentials not found in environment variables: {', '.join(missing)}"
            )
