"""
Ops Routes
==========

Read-only status endpoints. Nothing here touches the subscriber store or
the rate limiter.
"""

import time
from datetime import datetime, timezone

from flask import current_app, jsonify

from mailcollect.core.security import get_services
from . import ops_bp


def _get_uptime_seconds():
    """Seconds since this app instance was created"""
    return round(time.monotonic() - get_services().started_at, 1)


@ops_bp.route('/')
def index():
    brand_name = current_app.config.get('EMAIL_BRAND_NAME', 'mailcollect')
    port = current_app.config.get('PORT', 5000)
    return jsonify({
        'message': f'{brand_name} Email Collection API is running on port {port}!'
    })


@ops_bp.route('/api/health')
def health_check():
    """Public health endpoint for uptime monitors."""
    return jsonify({
        'success': True,
        'message': 'Server is healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'port': current_app.config.get('PORT', 5000),
        'uptime_seconds': _get_uptime_seconds(),
    }), 200
