"""
Ops Module
==========

Public status endpoints for uptime monitors (no auth):
- GET / -- service banner
- GET /api/health -- liveness, timestamp and port
"""

from flask import Blueprint

ops_bp = Blueprint('ops', __name__)

from . import routes  # noqa: E402,F401

__all__ = ['ops_bp']
