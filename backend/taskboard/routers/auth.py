import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.policies import Subject
from taskboard.core.security import create_access_token, decode_access_token
from taskboard.schemas.auth import PasswordChange, SignupRequest, Token
from taskboard.schemas.profile import ProfileResponse
from taskboard.services import accounts, profiles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

async def get_current_subject(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
) -> Subject:
    """Resolve the bearer token to the request's subject, with a fresh role lookup."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        account_id = uuid.UUID(payload.get("sub") or "")
    except (JWTError, ValueError) as e:
        logger.info("rejected bearer token: %s", e)
        raise credentials_exception
    return await profiles.load_subject(db, account_id)

def _token_for(account_id: uuid.UUID) -> dict:
    return {"access_token": create_access_token({"sub": str(account_id)}), "token_type": "bearer"}

@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
async def signup(user_in: SignupRequest, db: AsyncSession = Depends(get_db)):
    profile = await accounts.create_account(db, user_in.email, user_in.password, user_in.username)
    return _token_for(profile.id)

@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: AsyncSession = Depends(get_db),
):
    # OAuth2PasswordRequestForm uses 'username' field, but we treat it as email
    try:
        account = await accounts.authenticate(db, form_data.username, form_data.password)
    except accounts.InvalidCredentials as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_for(account.id)

@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's own profile, visible even when disabled"""
    return await profiles.get_profile(db, subject, subject.id)

@router.post("/change-password")
async def change_password(
    password_change: PasswordChange,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    try:
        await accounts.change_password(
            db, subject, password_change.current_password, password_change.new_password
        )
    except accounts.InvalidCredentials as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    return {"message": "Password changed successfully"}

@router.post("/logout")
async def logout():
    """Logout endpoint (client-side token removal)"""
    return {"message": "Logged out successfully"}
