"""Signup and login endpoints"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.models import User
from backend.schemas import AuthResponse, UserCreate, UserLogin, UserSummary
from backend.security import create_access_token, get_password_hash, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(user: User) -> AuthResponse:
    token = create_access_token({"sub": str(user.id), "username": user.username})
    return AuthResponse(token=token, user=UserSummary.model_validate(user))


@router.post("/signup", response_model=AuthResponse)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    """Register a new account and return a bearer token for it."""
    email = user_in.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = User(
        username=user_in.username.strip(),
        email=email,
        password_hash=get_password_hash(user_in.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return _issue_token(user)


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.lower()).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Credentials")

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    return _issue_token(user)
