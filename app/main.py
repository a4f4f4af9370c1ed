import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from app.core.config import settings
from app.core.database import init_db
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.security import get_password_hash
from app.models.user import User
from app.routers import auth, user, inventory, purchase, sale, order, document, log, company
from app.services.activity import log_activity

setup_logging()
logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "password"


async def ensure_default_admin() -> None:
    """Create admin/password when nobody has registered yet."""
    if await User.find_all().count():
        return

    await User(
        username=DEFAULT_ADMIN_USERNAME,
        hashed_password=get_password_hash(DEFAULT_ADMIN_PASSWORD),
    ).insert()
    logger.warning("Created default user '%s'. Change its password.", DEFAULT_ADMIN_USERNAME)
    await log_activity("System", f"Created default user: {DEFAULT_ADMIN_USERNAME}")


# ---------------------------------------------------------
# 1. LIFESPAN MANAGER
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- STARTUP ---
    logger.info("Initialization Started...")
    try:
        await init_db()
    except Exception:
        logger.critical("Could not connect to the database. Set MONGODB_URI and restart.", exc_info=True)
        raise

    await ensure_default_admin()
    await log_activity("System", f"Server started on port {settings.PORT}")
    logger.info("Server started on port %s", settings.PORT)

    yield

    # --- SHUTDOWN ---
    logger.info("System Shutting Down...")


# ---------------------------------------------------------
# 2. APP INITIALIZATION
# ---------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    description="API for the Online Inventory & Documents System"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# ---------------------------------------------------------
# 3. SYSTEM ROUTES
# ---------------------------------------------------------
@app.get("/api/test", tags=["System"])
async def api_test():
    return {
        "success": True,
        "message": "API is working",
        "time": datetime.utcnow().isoformat(),
    }


@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok"}


# ---------------------------------------------------------
# 4. ROUTER REGISTRATION
# ---------------------------------------------------------
app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(user.router, prefix="/api", tags=["Account Management"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(purchase.router, prefix="/api/purchases", tags=["Purchases"])
app.include_router(sale.router, prefix="/api/sales", tags=["Sales"])
app.include_router(order.router, prefix="/api/orders", tags=["Orders"])
app.include_router(document.router, prefix="/api")
app.include_router(log.router, prefix="/api/logs", tags=["Activity Log"])
app.include_router(company.router, prefix="/api/company", tags=["Company"])


# ---------------------------------------------------------
# 5. FRONTEND (must stay last)
# ---------------------------------------------------------
@app.api_route("/{full_path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def frontend(full_path: str, request: Request):
    """Unknown /api paths get a JSON 404; everything else is the static frontend."""
    if full_path == "api" or full_path.startswith("api/") or request.method != "GET":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="API route not found"
        )

    static_root = Path(settings.STATIC_DIR).resolve()
    requested = (static_root / full_path).resolve()

    if full_path and requested.is_file() and static_root in requested.parents:
        return FileResponse(requested)

    index = static_root / "index.html"
    if index.is_file():
        return FileResponse(index)

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Page not found"
    )
