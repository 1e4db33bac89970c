import logging
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketpoint.api.router import api_router
from ticketpoint.core.config import settings
from ticketpoint.core.errors import register_exception_handlers
from ticketpoint.core.logger_config import configure_logging
from ticketpoint.db.init_db import create_tables, seed_admin

configure_logging()
logger = logging.getLogger("ticketpoint.main")

def _run_migrations_if_needed():
    """Apply Alembic migrations on startup in production when AUTO_APPLY_MIGRATIONS is on.

    Safe to run repeatedly.
    """
    if settings.env.lower() != "prod" or not settings.auto_apply_migrations:
        return
    from alembic import command
    from alembic.config import Config
    alembic_ini = Path(__file__).resolve().parents[1] / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("[migrate] alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return
    cfg = Config(str(alembic_ini))
    # Resolve script_location when launched from an arbitrary CWD
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    logger.info("[migrate] Applying Alembic migrations -> head ...")
    try:
        command.upgrade(cfg, "head")
    except Exception:
        # Keep serving; migrations can be retried manually.
        logger.exception("[migrate] Migration failed")
        return
    logger.info("[migrate] Migrations applied successfully")

app = FastAPI(title=settings.app_name, version="0.1.0")

origins = settings.cors_origins
logger.info("[startup] Resolved CORS origins: %s", origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)
app.include_router(api_router)

@app.get("/")
def root():
    return {"message": f"{settings.app_name} is running"}

@app.on_event("startup")
def startup():
    _run_migrations_if_needed()
    if settings.env.lower() in {"dev", "development"}:
        create_tables()
        seed_admin()
