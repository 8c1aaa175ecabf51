"""
Dashboard Module
================

Single-page admin view of the subscriber list at /admin?key=<ADMIN_KEY>.
The page loads its data from /api/subscribers with the same key.
"""

from flask import Blueprint

dashboard_bp = Blueprint('admin', __name__, url_prefix='/admin')

from . import routes  # noqa: E402,F401

__all__ = ['dashboard_bp']
