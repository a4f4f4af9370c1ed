import asyncio
import sys
from app.core.database import init_db, DOCUMENT_MODELS
from app.models.user import User

async def reset(everything: bool):
    print("connecting to database...")
    await init_db()

    if everything:
        print("Deleting ALL records...")
        for model in DOCUMENT_MODELS:
            result = await model.delete_all()
            print(f"   - {model.Settings.name}: {result.deleted_count if result else 0} removed")
        print("Database is clean! You can now run 'python seed.py'.")
        return

    print("Deleting ALL users...")
    await User.delete_all()

    print("Users cleared! You can now run 'python seed.py'.")

if __name__ == "__main__":
    # python reset_db.py --all wipes every collection, not just users
    asyncio.run(reset("--all" in sys.argv[1:]))
