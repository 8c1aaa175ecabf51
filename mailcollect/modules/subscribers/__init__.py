"""
Subscribers Module
==================

Provides:
- POST /api/subscribe -- subscribe (rate limited)
- GET /api/subscribers/count -- subscriber count
- GET /api/subscribers -- full list (x-admin-key header required)

The in-memory SubscriberStore lives in store.py.
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__, url_prefix='/api')

from . import routes  # noqa: E402,F401
from .store import SubscriberRecord, SubscriberStore  # noqa: E402

__all__ = ['subscribers_bp', 'SubscriberRecord', 'SubscriberStore']
