import asyncio
from app.core.database import init_db
from app.models.user import User
from app.models.company import CompanyInfo
from app.core.security import get_password_hash
from app.core.config import settings

async def seed_data():
    print(f"Connecting to DB: {settings.DATABASE_NAME}...")
    await init_db()

    # 1. Get Credentials from .env
    admin_username = settings.ADMIN_USERNAME or "admin"
    admin_pass = settings.ADMIN_PASSWORD or "password"

    # 2. Check if Admin already exists
    existing_admin = await User.find_one(User.username == admin_username)

    if existing_admin:
        print(f"Admin '{admin_username}' already exists.")
        await existing_admin.delete()
        print("Old Admin deleted (Re-creating with new settings...)")

    # 3. Create New Admin
    admin_user = User(
        username=admin_username,
        hashed_password=get_password_hash(admin_pass)
    )
    await admin_user.insert()

    # 4. Default letterhead for reports
    if not await CompanyInfo.find_all().first_or_none():
        await CompanyInfo().insert()
        print("Company information created with defaults.")

    print("\nSUCCESS! Admin User Created.")
    print("------------------------------------------")
    print(f"Username: {admin_username}")
    print(f"Password: {admin_pass}")
    print("------------------------------------------")
    print("Now restart your server and login with THESE credentials.")

if __name__ == "__main__":
    asyncio.run(seed_data())
