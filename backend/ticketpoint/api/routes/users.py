import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketpoint.api.deps import get_current_email
from ticketpoint.core.errors import NotFound
from ticketpoint.db.session import get_db
from ticketpoint.models.base import utcnow
from ticketpoint.models.user import User, ROLE_USER
from ticketpoint.schemas.user import RoleOut, UpsertResult, UserLogin, UserOut

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("", response_model=UpsertResult)
def upsert_user(payload: UserLogin, db: Session = Depends(get_db)):
    """Save the account on first login, refresh ``last_logged_in`` afterwards.

    Role, fraud flag and creation time are never changed here.
    """
    email = payload.email.lower()
    now = utcnow()
    user = db.query(User).filter(User.email == email).first()
    if user:
        user.last_logged_in = now
        db.commit()
        return {"email": email, "created": False}
    user = User(
        email=email,
        name=payload.name,
        photo_url=payload.photo_url,
        role=ROLE_USER,
        is_fraud=False,
        created_at=now,
        last_logged_in=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent first login for the same email inserted the row first
        db.rollback()
        user = db.query(User).filter(User.email == email).one()
        user.last_logged_in = now
        db.commit()
        return {"email": email, "created": False}
    logger.info("New account %s", email)
    return {"email": email, "created": True}

@router.get("/role", response_model=RoleOut)
def my_role(email: str = Depends(get_current_email), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == email).first()
    return {"role": user.role if user else None}

@router.get("/{email}", response_model=UserOut)
def get_user(email: str, db: Session = Depends(get_db), _caller: str = Depends(get_current_email)):
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user:
        raise NotFound("User not found!")
    return user
