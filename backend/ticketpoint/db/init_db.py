import logging

from ticketpoint.db.session import engine, SessionLocal
from ticketpoint.models import user, ticket, booking, transaction  # noqa: F401
from ticketpoint.models.base import Base, utcnow
from ticketpoint.models.user import User, ROLE_ADMIN
from ticketpoint.core.config import settings

logger = logging.getLogger(__name__)

def create_tables():
    Base.metadata.create_all(bind=engine)

def seed_admin():
    """Make sure SEED_ADMIN_EMAIL exists with the admin role (idempotent)."""
    if not settings.seed_admin_email:
        return
    email = settings.seed_admin_email.lower()
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == email).first()
        if not admin:
            now = utcnow()
            admin = User(email=email, name="Admin", role=ROLE_ADMIN, is_fraud=False, created_at=now, last_logged_in=now)
            db.add(admin)
            logger.info("Seeded admin account %s", email)
        elif admin.role != ROLE_ADMIN:
            admin.role = ROLE_ADMIN
            logger.info("Promoted %s to admin", email)
        db.commit()
    finally:
        db.close()
