"""
Admin dashboard page.
Run with: pytest tests/test_dashboard.py -v
"""

import pytest

from conftest import ADMIN_KEY


def test_dashboard_with_key(client):
    response = client.get(f"/admin?key={ADMIN_KEY}")
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert response.headers["Cache-Control"] == "no-store"

    html = response.get_data(as_text=True)
    assert "TOA Creatives Subscribers" in html
    assert '"/api/subscribers"' in html
    assert f'"{ADMIN_KEY}"' in html


def test_dashboard_trailing_slash(client):
    assert client.get(f"/admin/?key={ADMIN_KEY}").status_code == 200


@pytest.mark.parametrize("query", ["", "?key=", "?key=wrong"])
def test_dashboard_rejects_bad_key(client, query):
    response = client.get(f"/admin{query}")
    assert response.status_code == 401
    assert response.mimetype == "text/html"
    assert response.get_data(as_text=True) == "<h2>Unauthorized</h2>"
    assert ADMIN_KEY not in response.get_data(as_text=True)


def test_dashboard_escapes_embedded_key(app, client):
    tricky = "k</script><script>alert(1)</script>"
    app.config["ADMIN_KEY"] = tricky

    response = client.get("/admin", query_string={"key": tricky})
    assert response.status_code == 200
    assert "</script><script>alert(1)" not in response.get_data(as_text=True)


def test_dashboard_key_is_usable_for_listing(client):
    """The key the page embeds is the one /api/subscribers accepts."""
    client.post("/api/subscribe", json={"email": "a@example.com"})
    assert client.get(f"/admin?key={ADMIN_KEY}").status_code == 200
    response = client.get("/api/subscribers", headers={"x-admin-key": ADMIN_KEY})
    assert response.get_json()["count"] == 1
