from app.models.activity_log import ActivityLog
from app.models.user import User

SECURITY_CODE = "1234"


async def register(client, username="alice", password="s3cret", code=SECURITY_CODE):
    return await client.post(
        "/api/register",
        json={"username": username, "password": password, "security_code": code},
    )


async def test_register_requires_security_code(client):
    response = await register(client, code="0000")
    assert response.status_code == 403
    assert response.json() == {"message": "Invalid security code"}


async def test_register_requires_fields(client):
    response = await register(client, password="")
    assert response.status_code == 400


async def test_register_stores_a_hash(client):
    response = await register(client)
    assert response.status_code == 200
    assert response.json()["success"] is True

    user = await User.find_one(User.username == "alice")
    assert user.hashed_password != "s3cret"


async def test_duplicate_username(client):
    await register(client)
    response = await register(client)
    assert response.status_code == 409


async def test_login(client):
    await register(client)

    response = await client.post("/api/login", json={"username": "alice", "password": "s3cret"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"] == "alice"
    assert body["token_type"] == "bearer"
    assert body["access_token"]

    wrong = await client.post("/api/login", json={"username": "alice", "password": "nope"})
    assert wrong.status_code == 401

    missing = await client.post("/api/login", json={"username": "alice"})
    assert missing.status_code == 400


async def test_token_names_the_acting_user(client):
    await register(client)
    token = (await client.post("/api/login", json={"username": "alice", "password": "s3cret"})).json()["access_token"]

    await client.post(
        "/api/inventory",
        json={"sku": "T-1", "name": "Tokened"},
        headers={"Authorization": f"Bearer {token}", "X-Username": "mallory"},
    )

    entry = await ActivityLog.find_one(ActivityLog.action == "Added: Tokened")
    assert entry.user == "alice"


async def test_change_password(client):
    await register(client)

    response = await client.put(
        "/api/account/password",
        json={"username": "alice", "new_password": "better", "security_code": SECURITY_CODE},
    )
    assert response.status_code == 200

    old = await client.post("/api/login", json={"username": "alice", "password": "s3cret"})
    assert old.status_code == 401
    new = await client.post("/api/login", json={"username": "alice", "password": "better"})
    assert new.status_code == 200


async def test_change_password_unknown_user(client):
    response = await client.put(
        "/api/account/password",
        json={"username": "ghost", "new_password": "x", "security_code": SECURITY_CODE},
    )
    assert response.status_code == 404


async def test_delete_account(client):
    await register(client)

    forbidden = await client.request(
        "DELETE", "/api/account", json={"username": "alice", "security_code": "bad"}
    )
    assert forbidden.status_code == 403

    response = await client.request(
        "DELETE", "/api/account", json={"username": "alice", "security_code": SECURITY_CODE}
    )
    assert response.status_code == 200
    assert await User.find_one(User.username == "alice") is None
