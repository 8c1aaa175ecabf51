"""
Contact Module
==============

Provides:
- POST /api/contact -- forward a contact-form message to the admin inbox (rate limited)
"""

from flask import Blueprint

contact_bp = Blueprint('contact', __name__, url_prefix='/api')

from . import routes  # noqa: E402,F401

__all__ = ['contact_bp']
