from flask import request, render_template_string, current_app, make_response

from mailcollect.core.logging_service import LoggingService
from mailcollect.core.security import is_valid_admin_key
from . import dashboard_bp

UNAUTHORIZED_HTML = '<h2>Unauthorized</h2>'

DASHBOARD_TEMPLATE = '''<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <meta name="referrer" content="no-referrer">
    <title>{{ brand_name }} Admin Dashboard</title>
    <style>
      body { font-family: Arial, sans-serif; background: #f9f9f9; padding: 40px; }
      h1 { color: #ff6b35; }
      table { border-collapse: collapse; width: 100%; background: white; }
      th, td { border: 1px solid #ddd; padding: 8px; }
      th { background: #ffeb3b; color: #333; }
    </style>
  </head>
  <body>
    <h1>{{ brand_name }} Subscribers</h1>
    <p id="subsCount"></p>
    <table id="subsTable">
      <thead>
        <tr><th>Email</th><th>Name</th><th>Subscribed At</th><th>Status</th></tr>
      </thead>
      <tbody></tbody>
    </table>
    <script>
      fetch({{ subscribers_url|tojson }}, { headers: { 'x-admin-key': {{ admin_key|tojson }} } })
        .then(res => res.json())
        .then(data => {
          if (!data.success) { return; }
          document.getElementById('subsCount').textContent = 'Total: ' + data.count;
          const tbody = document.querySelector('#subsTable tbody');
          data.subscribers.forEach(sub => {
            const tr = document.createElement('tr');
            [sub.email, sub.name, sub.subscribedAt, sub.status].forEach(value => {
              const td = document.createElement('td');
              td.textContent = value;
              tr.appendChild(td);
            });
            tbody.appendChild(tr);
          });
        });
    </script>
  </body>
</html>'''


def _no_store(response):
    response.headers['Cache-Control'] = 'no-store'
    response.headers['Referrer-Policy'] = 'no-referrer'
    return response


@dashboard_bp.route('/')
@dashboard_bp.route('')
def admin_dashboard():
    """Subscriber dashboard, protected by the ?key= query parameter"""
    admin_key = request.args.get('key')
    if not is_valid_admin_key(admin_key):
        LoggingService.log_security_event('Rejected admin key on dashboard')
        response = make_response(UNAUTHORIZED_HTML, 401)
        response.mimetype = 'text/html'
        return _no_store(response)

    html = render_template_string(
        DASHBOARD_TEMPLATE,
        brand_name=current_app.config.get('EMAIL_BRAND_NAME', 'mailcollect'),
        admin_key=admin_key,
        subscribers_url='/api/subscribers',
    )
    response = make_response(html, 200)
    response.mimetype = 'text/html'
    return _no_store(response)
