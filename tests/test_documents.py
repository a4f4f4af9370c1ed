from urllib.parse import quote

from app.core.config import settings
from app.models.document import StoredDocument


async def upload(client, content=b"hello world", name="Q1 report.txt", content_type="text/plain; charset=utf-8"):
    return await client.post(
        "/api/documents",
        content=content,
        headers={
            "Content-Type": content_type,
            "X-File-Name": quote(name),
            "X-Username": "alice",
        },
    )


async def test_upload_returns_a_list(client):
    response = await upload(client)
    assert response.status_code == 201, response.text

    body = response.json()
    assert isinstance(body, list) and len(body) == 1
    doc = body[0]
    assert doc["name"] == "Q1 report.txt"
    assert doc["size"] == 11
    assert doc["content_type"] == "text/plain"
    assert doc["uploaded_by"] == "alice"
    assert "data" not in doc


async def test_empty_upload_is_rejected(client):
    response = await upload(client, content=b"")
    assert response.status_code == 400


async def test_upload_without_name_gets_one(client):
    response = await client.post("/api/documents", content=b"abc")
    assert response.status_code == 201
    assert response.json()[0]["name"].startswith("file_")


async def test_list_is_metadata_only(client):
    await upload(client, name="a.txt")
    await upload(client, name="b.txt")

    response = await client.get("/api/documents")
    assert response.status_code == 200
    docs = response.json()
    assert {doc["name"] for doc in docs} == {"a.txt", "b.txt"}
    assert all("data" not in doc for doc in docs)


async def test_download_returns_exact_bytes(client):
    payload = bytes(range(256))
    doc = (await upload(client, content=payload, name="blob.bin", content_type="application/octet-stream")).json()[0]

    response = await client.get(f"/api/documents/download/{doc['id']}")
    assert response.status_code == 200
    assert response.content == payload
    assert response.headers["content-length"] == "256"
    assert response.headers["cache-control"] == "no-transform"
    assert response.headers["content-disposition"].startswith("attachment;")

    inline = await client.get(f"/api/documents/download/{doc['id']}", params={"inline": "1"})
    assert inline.headers["content-disposition"].startswith("inline;")


async def test_download_by_name(client):
    await upload(client, name="notes.txt")

    response = await client.get("/api/documents/download/name/notes.txt")
    assert response.status_code == 200
    assert response.content == b"hello world"

    missing = await client.get("/api/documents/download/name/other.txt")
    assert missing.status_code == 404


async def test_verify_and_update(client):
    doc = (await upload(client)).json()[0]

    verify = await client.get(f"/api/documents/{doc['id']}/verify")
    assert verify.status_code == 200
    assert verify.json()["valid"] is True
    assert verify.json()["actual_data_length"] == 11

    updated = await client.put(f"/api/documents/{doc['id']}", json={"folder": "Invoices", "tags": ["2025"]})
    assert updated.status_code == 200
    assert updated.json()["folder"] == "Invoices"
    assert updated.json()["tags"] == ["2025"]

    filtered = await client.get("/api/documents", params={"folder": "Invoices"})
    assert [row["id"] for row in filtered.json()] == [doc["id"]]


async def test_delete_document(client):
    doc = (await upload(client)).json()[0]

    response = await client.delete(f"/api/documents/{doc['id']}")
    assert response.status_code == 204

    again = await client.delete(f"/api/documents/{doc['id']}")
    assert again.status_code == 404


async def test_cleanup_removes_broken_documents(client):
    await upload(client, name="good.txt")
    await StoredDocument(name="empty.txt", size=10, data=b"").insert()
    await StoredDocument(name="short.txt", size=99, data=b"abc").insert()

    response = await client.delete("/api/cleanup-documents")
    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted_count": 2}

    remaining = [doc.name for doc in await StoredDocument.find_all().to_list()]
    assert remaining == ["good.txt"]


async def test_empty_document_cannot_be_downloaded(client):
    doc = StoredDocument(name="empty.txt", size=0, data=b"")
    await doc.insert()

    response = await client.get(f"/api/documents/download/{doc.id}")
    assert response.status_code == 400


async def test_null_name_or_tags_are_ignored(client):
    doc = (await upload(client, name="a.txt")).json()[0]

    for body in ({"name": None}, {"tags": None}):
        response = await client.put(f"/api/documents/{doc['id']}", json=body)
        assert response.status_code == 400
        assert response.json() == {"message": "Nothing to update"}

    renamed = await client.put(f"/api/documents/{doc['id']}", json={"name": None, "folder": "Archive"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "a.txt"

    listed = await client.get("/api/documents")
    assert listed.status_code == 200
    assert listed.json()[0]["name"] == "a.txt"
    assert listed.json()[0]["tags"] == []


async def test_folder_can_be_cleared(client):
    doc = (await upload(client)).json()[0]
    await client.put(f"/api/documents/{doc['id']}", json={"folder": "Invoices"})

    response = await client.put(f"/api/documents/{doc['id']}", json={"folder": None})
    assert response.status_code == 200
    assert response.json()["folder"] is None


async def test_upload_over_the_limit_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 0)

    response = await upload(client, content=b"x")
    assert response.status_code == 413
    assert await StoredDocument.find_all().count() == 0
