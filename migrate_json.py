"""
Import the legacy JSON files (users.json, inventory.json, documents.json)
into MongoDB.

    python migrate_json.py [directory]

Missing files are skipped. Plaintext passwords are hashed on the way in.
"""
import asyncio
import base64
import json
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from app.core.database import init_db
from app.core.security import get_password_hash
from app.models.document import StoredDocument
from app.models.inventory import InventoryItem
from app.models.user import User


def load_json(path: Path):
    if not path.exists():
        return None
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def parse_date(value):
    if not value:
        return datetime.utcnow()
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return datetime.utcnow()


def decode_data(value) -> bytes:
    """Accepts a serialized Node Buffer ({"type": "Buffer", "data": [...]}) or base64 text."""
    if isinstance(value, dict) and isinstance(value.get("data"), list):
        return bytes(value["data"])
    if isinstance(value, str) and value:
        try:
            return base64.b64decode(value)
        except ValueError:
            return value.encode("utf-8")
    return b""


async def import_users(rows) -> int:
    count = 0
    for row in rows:
        username = row.get("username")
        password = row.get("password")
        if not username or not password:
            continue
        if await User.find_one(User.username == username):
            print(f"   - user '{username}' exists, skipped")
            continue
        await User(username=username, hashed_password=get_password_hash(password)).insert()
        count += 1
    return count


async def import_inventory(rows) -> int:
    count = 0
    for row in rows:
        sku = row.get("sku")
        if not sku or await InventoryItem.find_one(InventoryItem.sku == sku):
            continue
        await InventoryItem(
            sku=sku,
            name=row.get("name") or sku,
            category=row.get("category") or "",
            quantity=int(row.get("quantity") or 0),
            unit_cost=float(row.get("unitCost", row.get("unit_cost")) or 0),
            unit_price=float(row.get("unitPrice", row.get("unit_price")) or 0),
        ).insert()
        count += 1
    return count


async def import_documents(rows) -> int:
    count = 0
    for row in rows:
        data = decode_data(row.get("data"))
        await StoredDocument(
            name=row.get("name") or f"file_{count}",
            size=int(row.get("size") or len(data)),
            date=parse_date(row.get("date")),
            data=data,
            content_type=row.get("contentType") or row.get("content_type") or "application/octet-stream",
            uploaded_by="Migration",
        ).insert()
        count += 1
    return count


async def migrate(directory: Path):
    print("connecting to database...")
    await init_db()

    steps = [
        ("users.json", import_users, "users"),
        ("inventory.json", import_inventory, "inventory items"),
        ("documents.json", import_documents, "documents"),
    ]
    for filename, importer, label in steps:
        rows = load_json(directory / filename)
        if rows is None:
            print(f"{filename} not found, skipped")
            continue
        imported = await importer(rows)
        print(f"Imported {imported} {label}")


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(".")
    asyncio.run(migrate(target))
