from datetime import date, timedelta

import pytest
from firebase_admin.exceptions import InvalidArgumentError

from app.core.firebase import firebase_service


async def test_get_account_settings_creates_row_from_claims(client):
    response = await client.get("/api/v1/settings/me")

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == "alice"
    assert body["user_email"] == "alice@example.com"
    assert body["user_phone"] is None
    assert body["user_priset_show_age"] is True


@pytest.mark.parametrize("raw, stored", [("+62 812-3456-7890", "+6281234567890"), ("6281234567890", "+6281234567890")])
async def test_update_phone_normalizes_number(client, add_user, raw, stored):
    await add_user("alice", account={"user_phone_verified": True})

    response = await client.put("/api/v1/settings/phone", json={"phone": raw})

    assert response.status_code == 200
    assert response.json()["user_phone"] == stored
    assert response.json()["user_phone_verified"] is False


async def test_update_phone_rejects_bad_format(client):
    response = await client.put("/api/v1/settings/phone", json={"phone": "call-me-maybe"})

    assert response.status_code == 422


async def test_update_phone_surfaces_auth_platform_errors(client, monkeypatch):
    def reject(user_id, phone):
        raise InvalidArgumentError("phone number already in use")

    monkeypatch.setattr(firebase_service, "update_phone_number", reject)

    response = await client.put("/api/v1/settings/phone", json={"phone": "+6281234567890"})

    assert response.status_code == 400
    assert "phone number already in use" in response.json()["detail"]


async def test_update_birthdate_changes_profile(client, add_user):
    await add_user("alice")

    response = await client.put("/api/v1/settings/birthdate", json={"birthdate": "2001-02-03"})

    assert response.status_code == 200
    assert response.json()["profile_birthdate"] == "2001-02-03"


async def test_update_birthdate_requires_profile(client):
    response = await client.put("/api/v1/settings/birthdate", json={"birthdate": "2001-02-03"})

    assert response.status_code == 404


async def test_update_birthdate_rejects_future_date(client, add_user):
    await add_user("alice")
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    response = await client.put("/api/v1/settings/birthdate", json={"birthdate": tomorrow})

    assert response.status_code == 422


async def test_update_privacy_only_changes_given_flags(client, add_user):
    await add_user("alice")

    response = await client.put("/api/v1/settings/privacy", json={"show_bio": False})

    assert response.status_code == 200
    body = response.json()
    assert body["user_priset_show_bio"] is False
    assert body["user_priset_show_age"] is True
    assert body["user_priset_is_private"] is False
    assert body["user_priset_last_updated"] is not None
