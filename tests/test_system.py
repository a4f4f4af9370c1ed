from app.core.security import get_password_hash, verify_password
from app.main import ensure_default_admin
from app.models.activity_log import ActivityLog
from app.models.user import User


async def test_api_test_endpoint(client):
    response = await client.get("/api/test")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "time" in body


async def test_unknown_api_route(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"message": "API route not found"}

    posted = await client.post("/api/does-not-exist", json={})
    assert posted.status_code == 404


async def test_frontend_fallback_serves_index(client):
    response = await client.get("/some/page")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


async def test_company_defaults_and_update(client):
    default = await client.get("/api/company")
    assert default.status_code == 200
    assert default.json()["name"] == "L&B Company"

    response = await client.put(
        "/api/company",
        json={"name": "Acme Sdn Bhd", "address": "1 Jalan", "phone": "123", "email": "a@b.c"},
    )
    assert response.status_code == 200
    assert (await client.get("/api/company")).json()["name"] == "Acme Sdn Bhd"

    invalid = await client.put("/api/company", json={"name": ""})
    assert invalid.status_code == 400


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_default_admin_is_created_once(db):
    await ensure_default_admin()
    await ensure_default_admin()

    users = await User.find_all().to_list()
    assert [user.username for user in users] == ["admin"]
    assert verify_password("password", users[0].hashed_password)

    entry = await ActivityLog.find_one(ActivityLog.action == "Created default user: admin")
    assert entry is not None


async def test_no_default_admin_when_users_exist(db):
    await User(username="alice", hashed_password=get_password_hash("x")).insert()

    await ensure_default_admin()

    assert await User.find_one(User.username == "admin") is None
