"""Login endpoint and the caller's own profile."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from edura_finance.app.core.security import create_access_token, get_current_user, verify_password
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.user import TokenRead, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the active user for these credentials; every failure is a 400."""
    user = db.query(User).filter(User.email == email).first()
    if user is None or not user.hashed_password or not verify_password(password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    return user


@router.post("/login", response_model=TokenRead)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, credentials.email, credentials.password)
    # Clients route managers and teachers to different screens
    return TokenRead(access_token=create_access_token(user_id=user.id, role=user.role), role=user.role)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
