"""
mailcollect Starter
===================

Runs the email collection API with settings from the environment / .env.

Run with:
    python starter-template/app.py

Visit:
    http://localhost:5000/api/health   - Health check
    http://localhost:5000/admin?key=.. - Subscriber dashboard
"""

import sys

from mailcollect import create_app
from mailcollect.core.errors import ConfigError


def main():
    try:
        app = create_app()
    except ConfigError as e:
        print(f"[STARTER] Cannot start: {e.message}", file=sys.stderr)
        return 1

    port = app.config['PORT']

    print("\n" + "=" * 60)
    print(f"{app.config['EMAIL_BRAND_NAME']} Email Backend running on port {port}")
    print("=" * 60)
    print(f"API endpoints:   http://localhost:{port}/api")
    print(f"Health check:    http://localhost:{port}/api/health")
    print(f"Admin dashboard: http://localhost:{port}/admin?key=...")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
