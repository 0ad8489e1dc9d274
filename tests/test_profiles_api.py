from datetime import date, timedelta

from sqlalchemy import select

from app.models import BlockedUser, Match, User
from app.api.v1.profiles import calculate_age


PROFILE_BODY = {
    "profile_username": "  Alice  ",
    "profile_birthdate": "2002-05-17",
    "profile_bio": "  ",
    "profile_academic_interests": " AI, Security ",
    "profile_non_academic_interests": "",
    "profile_looking_for": "Thesis partner",
}


async def test_create_profile_creates_account_row_and_cleans_fields(client, db_session):
    response = await client.post("/api/v1/profiles/me", json=PROFILE_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == "alice"
    assert body["profile_username"] == "Alice"
    assert body["profile_bio"] is None
    assert body["profile_academic_interests"] == "AI, Security"
    assert body["profile_non_academic_interests"] is None
    assert body["profile_looking_for"] == "Thesis partner"

    user = (await db_session.execute(select(User).where(User.user_id == "alice"))).scalar_one()
    assert user.user_email == "alice@example.com"
    assert user.user_email_verified is True


async def test_create_profile_twice_is_rejected(client):
    await client.post("/api/v1/profiles/me", json=PROFILE_BODY)

    response = await client.post("/api/v1/profiles/me", json=PROFILE_BODY)

    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


async def test_create_profile_rejects_future_birthdate(client):
    body = dict(PROFILE_BODY, profile_birthdate=(date.today() + timedelta(days=1)).isoformat())

    response = await client.post("/api/v1/profiles/me", json=body)

    assert response.status_code == 422


async def test_get_my_profile(client, add_user):
    response = await client.get("/api/v1/profiles/me")
    assert response.status_code == 404

    await add_user("alice", profile_academic_interests="AI")
    response = await client.get("/api/v1/profiles/me")

    assert response.status_code == 200
    assert response.json()["profile_academic_interests"] == "AI"


async def test_update_profile_changes_only_given_fields(client, add_user):
    await add_user("alice", profile_academic_interests="AI", profile_bio="Hello")

    response = await client.put(
        "/api/v1/profiles/me",
        json={"profile_academic_interests": "AI, Robotics", "profile_bio": ""},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["profile_academic_interests"] == "AI, Robotics"
    assert body["profile_bio"] is None
    assert body["profile_username"] == "Alice"


async def test_update_profile_rejects_null_username(client, add_user):
    await add_user("alice")

    response = await client.put("/api/v1/profiles/me", json={"profile_username": None})

    assert response.status_code == 422


async def test_update_missing_profile_is_404(client):
    response = await client.put("/api/v1/profiles/me", json={"profile_bio": "Hi"})

    assert response.status_code == 404


async def test_public_profile_shows_age_and_bio(client, add_user):
    await add_user("alice")
    await add_user("bob", profile_bio="Hi there", profile_birthdate=date(2000, 1, 1))

    response = await client.get("/api/v1/profiles/bob")

    assert response.status_code == 200
    body = response.json()
    assert body["age"] == calculate_age(date(2000, 1, 1))
    assert body["profile_bio"] == "Hi there"


async def test_public_profile_respects_privacy_flags(client, add_user):
    await add_user("alice")
    await add_user(
        "bob",
        profile_bio="Hi there",
        account={"user_priset_show_age": False, "user_priset_show_bio": False},
    )

    body = (await client.get("/api/v1/profiles/bob")).json()

    assert body["age"] is None
    assert body["profile_bio"] is None


async def test_private_profile_visible_only_to_connections(client, add_user, db_session):
    await add_user("alice")
    await add_user("bob", account={"user_priset_is_private": True})

    response = await client.get("/api/v1/profiles/bob")
    assert response.status_code == 404

    db_session.add(Match(match_user1_id="bob", match_user2_id="alice"))
    await db_session.commit()

    response = await client.get("/api/v1/profiles/bob")
    assert response.status_code == 200


async def test_blocked_profile_is_hidden(client, add_user, db_session):
    await add_user("alice")
    await add_user("bob")
    db_session.add(BlockedUser(blocker_id="bob", blocked_id="alice"))
    await db_session.commit()

    response = await client.get("/api/v1/profiles/bob")

    assert response.status_code == 404

