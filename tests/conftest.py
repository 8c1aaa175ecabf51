"""
Shared fixtures: an app built through create_app() with a fake clock on
the rate limiter and a mocked email service, so no mail ever leaves the
test run.
"""

from unittest.mock import MagicMock

import pytest

from mailcollect import create_app
from mailcollect.core.rate_limit import RateLimiter
from mailcollect.modules.email import EmailService

ADMIN_KEY = 'test-admin-key'

TEST_CONFIG = {
    'TESTING': True,
    'EMAIL_PROVIDER': 'smtp',
    'EMAIL_USER': 'sender@example.com',
    'EMAIL_PASS': 'app-password',
    'EMAIL_ADMIN_RECIPIENTS': ['admin@example.com'],
    'ADMIN_KEY': ADMIN_KEY,
    'PORT': 5000,
    'RATE_LIMIT_MAX': 5,
    'RATE_LIMIT_WINDOW': 900,
    'TRUST_PROXY_HEADERS': False,
    'STATIC_FOLDER': None,
}


class FakeClock:
    """Monotonic clock the tests move by hand"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def email_service():
    return MagicMock(spec=EmailService)


@pytest.fixture
def app(clock, email_service):
    return create_app(
        TEST_CONFIG,
        rate_limiter=RateLimiter(max_requests=5, window=900, clock=clock),
        email_service=email_service,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions['mailcollect'].store
