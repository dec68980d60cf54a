"""Handles user registration.

Public sign-up creates teachers and students only. Manager accounts come from
the development seed or from ``/auth/create-manager``, which requires the
``EDURA_MANAGER_SECRET_KEY`` shared secret.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from edura_finance.app.core.constants import ROLE_MANAGER
from edura_finance.app.core.security import get_password_hash
from edura_finance.app.core.settings import get_settings
from edura_finance.app.db.base import Base
from edura_finance.app.db.session import engine, get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.user import ManagerCreate, UserCreate, UserRead

Base.metadata.create_all(bind=engine)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _create_user(db: Session, email: str, password: str, full_name: str | None, role: str) -> User:
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    hashed_password = get_password_hash(password)  # Hash password before storing
    user = User(email=email, full_name=full_name, hashed_password=hashed_password, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    return _create_user(db, user_in.email, user_in.password, user_in.full_name, user_in.role)


@router.post("/create-manager", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_manager(manager_in: ManagerCreate, db: Session = Depends(get_db)):
    expected = get_settings().manager_secret_key
    # An unset secret disables the route entirely
    if not expected or not secrets.compare_digest(manager_in.secret_key, expected):
        logger.warning("Rejected manager creation for %s", manager_in.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user = _create_user(db, manager_in.email, manager_in.password, manager_in.full_name, ROLE_MANAGER)
    logger.info("Created manager account %s", user.id)
    return user
