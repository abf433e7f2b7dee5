from datetime import datetime, timedelta, timezone

import pytest

from shared.config import settings
from shared.errors import NotFoundError
from shared.security import Role
from services.notification_service.models import Notification
from services.notification_service.service import NotificationService

from .conftest import auth_headers


async def seed_inbox(db, user, count):
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    notifications = [
        Notification(
            user_id=user.id,
            role=user.role,
            message=f"message {n}",
            created_at=start + timedelta(minutes=n),
        )
        for n in range(count)
    ]
    db.add_all(notifications)
    await db.commit()
    return notifications


async def test_list_is_newest_first(client, db, customer):
    await seed_inbox(db, customer, 3)

    response = await client.get("/notifications/", headers=auth_headers(customer))

    assert response.status_code == 200
    messages = [n["message"] for n in response.json()["notifications"]]
    assert messages == ["message 2", "message 1", "message 0"]


async def test_list_respects_limit(client, db, customer):
    await seed_inbox(db, customer, 5)

    response = await client.get("/notifications/?limit=2", headers=auth_headers(customer))

    assert [n["message"] for n in response.json()["notifications"]] == ["message 4", "message 3"]


async def test_default_page_size(db, customer, monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_PAGE_LIMIT", 3)
    await seed_inbox(db, customer, 5)

    notifications = await NotificationService.list_notifications(db, customer.id)

    assert len(notifications) == 3


async def test_limit_is_capped(db, customer, monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_PAGE_MAX", 2)
    await seed_inbox(db, customer, 4)

    notifications = await NotificationService.list_notifications(db, customer.id, limit=100)

    assert len(notifications) == 2


async def test_only_own_notifications_are_listed(client, db, customer, rider):
    await seed_inbox(db, rider, 2)

    response = await client.get("/notifications/", headers=auth_headers(customer))

    assert response.json()["notifications"] == []


async def test_mark_read_is_idempotent(client, db, customer):
    first, _ = await seed_inbox(db, customer, 2)

    once = await client.patch(f"/notifications/{first.id}/read", headers=auth_headers(customer))
    twice = await client.patch(f"/notifications/{first.id}/read", headers=auth_headers(customer))
    count = await client.get("/notifications/unread-count", headers=auth_headers(customer))

    assert once.status_code == twice.status_code == 200
    assert once.json()["read"] is True
    assert twice.json()["read"] is True
    assert count.json() == {"count": 1}


async def test_cannot_mark_someone_elses_notification(client, db, customer, rider):
    (notification,) = await seed_inbox(db, rider, 1)

    response = await client.patch(
        f"/notifications/{notification.id}/read", headers=auth_headers(customer)
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


async def test_mark_missing_notification(db, customer):
    with pytest.raises(NotFoundError):
        await NotificationService.mark_as_read(db, "missing", customer.id)


async def test_mark_all_read_reports_count(client, db, customer, rider):
    first, _, _ = await seed_inbox(db, customer, 3)
    await seed_inbox(db, rider, 2)
    await client.patch(f"/notifications/{first.id}/read", headers=auth_headers(customer))

    response = await client.patch("/notifications/read-all", headers=auth_headers(customer))
    again = await client.patch("/notifications/read-all", headers=auth_headers(customer))

    assert response.json() == {"message": "All notifications marked as read", "count": 2}
    assert again.json()["count"] == 0
    rider_count = await client.get("/notifications/unread-count", headers=auth_headers(rider))
    assert rider_count.json() == {"count": 2}


async def test_create_notification_is_staged_until_commit(db, customer):
    customer_id = customer.id
    notification = await NotificationService.create_notification(
        db, user_id=customer_id, role=Role.CUSTOMER, message="hello", order_id="order-1"
    )
    assert notification.id is not None
    assert notification.read is False

    await db.rollback()

    assert await NotificationService.unread_count(db, customer_id) == 0


async def test_requires_authentication(client, schema):
    response = await client.get("/notifications/")
    assert response.status_code == 401
