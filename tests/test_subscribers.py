"""
Subscription flow, subscriber store and the admin listing.
Run with: pytest tests/test_subscribers.py -v
"""

import threading
from datetime import datetime, timezone

import pytest

from mailcollect.core.errors import DispatchError, DuplicateSubscriberError
from mailcollect.modules.subscribers.store import SubscriberRecord, SubscriberStore

from conftest import ADMIN_KEY


# ---------------------------------------------------------------------------
# SubscriberStore
# ---------------------------------------------------------------------------

def test_store_insert_and_lookup():
    store = SubscriberStore()
    assert store.insert(SubscriberRecord("Ada@Example.com", "Ada")) == 1
    assert store.has("ada@example.com")
    assert store.has("ADA@EXAMPLE.COM")
    assert store.get("ada@example.com").name == "Ada"
    assert store.count() == len(store) == 1


def test_store_rejects_duplicate_instead_of_overwriting():
    store = SubscriberStore()
    store.insert(SubscriberRecord("ada@example.com", "Ada"))
    with pytest.raises(DuplicateSubscriberError):
        store.insert(SubscriberRecord("ADA@example.com", "Imposter"))
    assert store.get("ada@example.com").name == "Ada"
    assert store.count() == 1


def test_store_listing_is_a_stable_snapshot():
    store = SubscriberStore()
    for email in ("c@example.com", "a@example.com", "b@example.com"):
        store.insert(SubscriberRecord(email))
    snapshot = store.all()
    assert [r.email for r in snapshot] == ["c@example.com", "a@example.com", "b@example.com"]

    store.insert(SubscriberRecord("d@example.com"))
    assert len(snapshot) == 3


def test_store_check_then_insert_under_threads():
    store = SubscriberStore()
    outcomes = []
    lock = threading.Lock()

    def attempt():
        try:
            store.insert(SubscriberRecord("race@example.com"))
            result = "inserted"
        except DuplicateSubscriberError:
            result = "duplicate"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("inserted") == 1
    assert store.count() == 1


def test_record_defaults_and_serialisation():
    when = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    record = SubscriberRecord("  Ada@Example.COM ", None, subscribed_at=when)
    assert record.to_dict() == {
        "email": "ada@example.com",
        "name": "Anonymous",
        "subscribedAt": "2024-05-01T12:30:00+00:00",
        "status": "active",
    }


# ---------------------------------------------------------------------------
# POST /api/subscribe
# ---------------------------------------------------------------------------

def test_subscribe_then_duplicate_with_other_casing(client, store, email_service):
    response = client.post("/api/subscribe", json={"email": "Test@Example.com", "name": "Ada"})
    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "message": "Successfully subscribed! Check your email for confirmation.",
        "totalSubscribers": 1,
    }

    response = client.post("/api/subscribe", json={"email": "test@example.com"})
    assert response.status_code == 409
    assert response.get_json() == {
        "success": False,
        "message": "This email is already subscribed to our newsletter",
    }
    assert store.count() == 1
    assert email_service.send_subscription_emails.call_count == 1


def test_subscribe_sends_both_emails_for_new_record(client, store, email_service):
    client.post("/api/subscribe", json={"email": "Ada@Example.com", "name": " Ada "})

    record, total = email_service.send_subscription_emails.call_args.args
    assert record is store.get("ada@example.com")
    assert record.email == "ada@example.com"
    assert record.name == "Ada"
    assert total == 1


@pytest.mark.parametrize("body", [{}, {"name": "Ada"}, {"email": ""}, {"email": "   "}, {"email": None}])
def test_subscribe_requires_email(client, store, body):
    response = client.post("/api/subscribe", json=body)
    assert response.status_code == 400
    assert response.get_json() == {"success": False, "message": "Email is required"}
    assert store.count() == 0


@pytest.mark.parametrize("email", ["not-an-email", "a@b", "user@", 12345])
def test_subscribe_rejects_malformed_email(client, store, email_service, email):
    response = client.post("/api/subscribe", json={"email": email})
    assert response.status_code == 400
    assert response.get_json()["success"] is False
    assert store.count() == 0
    email_service.send_subscription_emails.assert_not_called()


def test_subscribe_with_non_json_body(client, store):
    response = client.post("/api/subscribe", data="email=a@example.com",
                           content_type="application/x-www-form-urlencoded")
    assert response.status_code == 400
    assert store.count() == 0


@pytest.mark.parametrize("name", [None, "", "   ", 7])
def test_subscribe_name_defaults_to_anonymous(client, store, name):
    body = {"email": "anon@example.com"}
    if name is not None:
        body["name"] = name
    client.post("/api/subscribe", json=body)
    assert store.get("anon@example.com").name == "Anonymous"


def test_subscribe_counts_accumulate(client):
    totals = [
        client.post("/api/subscribe", json={"email": f"u{n}@example.com"}).get_json()["totalSubscribers"]
        for n in range(3)
    ]
    assert totals == [1, 2, 3]
    assert client.get("/api/subscribers/count").get_json() == {"success": True, "count": 3}


def test_dispatch_failure_keeps_subscriber(client, store, email_service):
    email_service.send_subscription_emails.side_effect = DispatchError("relay down")

    response = client.post("/api/subscribe", json={"email": "kept@example.com"})
    assert response.status_code == 500
    assert response.get_json() == {
        "success": False,
        "message": "Failed to process subscription. Please try again later.",
    }
    assert "relay down" not in response.get_data(as_text=True)
    assert store.has("kept@example.com")

    # The record is the durable side effect; retrying is a duplicate
    email_service.send_subscription_emails.side_effect = None
    response = client.post("/api/subscribe", json={"email": "kept@example.com"})
    assert response.status_code == 409
    assert store.count() == 1


def test_unexpected_store_error_is_generic_500(app, client, monkeypatch):
    store = app.extensions["mailcollect"].store

    def boom(record):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(store, "insert", boom)
    response = client.post("/api/subscribe", json={"email": "x@example.com"})
    assert response.status_code == 500
    assert "disk on fire" not in response.get_data(as_text=True)


# ---------------------------------------------------------------------------
# GET /api/subscribers/count and GET /api/subscribers
# ---------------------------------------------------------------------------

def test_count_starts_at_zero(client):
    assert client.get("/api/subscribers/count").get_json() == {"success": True, "count": 0}


def test_list_with_admin_key(client, store):
    for email in ("a@example.com", "b@example.com"):
        client.post("/api/subscribe", json={"email": email, "name": email[0]})

    response = client.get("/api/subscribers", headers={"x-admin-key": ADMIN_KEY})
    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["count"] == store.count() == len(data["subscribers"]) == 2
    assert [s["email"] for s in data["subscribers"]] == ["a@example.com", "b@example.com"]
    assert set(data["subscribers"][0]) == {"email", "name", "subscribedAt", "status"}
    assert data["subscribers"][0]["status"] == "active"


@pytest.mark.parametrize("headers", [{}, {"x-admin-key": "wrong"}, {"x-admin-key": ""}])
def test_list_rejects_bad_admin_key(client, headers):
    client.post("/api/subscribe", json={"email": "secret@example.com"})

    response = client.get("/api/subscribers", headers=headers)
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "Unauthorized access"}
    assert b"secret@example.com" not in response.data


def test_list_denied_when_no_admin_key_configured(app, client):
    app.config["ADMIN_KEY"] = None
    assert client.get("/api/subscribers").status_code == 401
    assert client.get("/api/subscribers", headers={"x-admin-key": ""}).status_code == 401


def test_list_accepts_non_string_configured_key(app, client):
    app.config["ADMIN_KEY"] = 12345
    assert client.get("/api/subscribers", headers={"x-admin-key": "12345"}).status_code == 200
    assert client.get("/api/subscribers", headers={"x-admin-key": "1234"}).status_code == 401
