# prelovin/auth/service.py

from datetime import timedelta, datetime, timezone
from typing import Annotated, Optional
from uuid import uuid4
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt
from jwt import PyJWTError

from . import models
from ..core.config import settings
from ..core.exceptions import AuthenticationError
from ..database.core import get_db
from ..logging import logger
from ..users.models import User
from ..users.service import UserService

# --- Configuration ---
SECRET_KEY = settings.AUTH_SECRET_KEY
ALGORITHM = settings.AUTH_ALGORITHM
AUDIENCE = settings.AUTH_AUDIENCE or None
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

bearer_scheme = HTTPBearer(auto_error=False)

IDENTITY_CLAIMS = ("email", "first_name", "last_name", "profile_image_url")


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    **claims
) -> str:
    """
    Mint an access token the way the identity provider does.

    Used by local development tooling and the test-suite; production tokens
    come from the provider and only need to share the signing secret.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    encode = {
        'sub': user_id,
        'exp': expire,
        'scope': 'access_token',
        'jti': str(uuid4()),
    }
    if AUDIENCE:
        encode['aud'] = AUDIENCE
    encode.update({key: value for key, value in claims.items() if key in IDENTITY_CLAIMS and value is not None})
    return jwt.encode(encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> models.TokenData:
    """Decodes and verifies an access token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=AUDIENCE)
    except PyJWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthenticationError(message="Invalid token", technical_details=str(e))

    if payload.get('scope') != 'access_token':
        raise AuthenticationError(message="Invalid token scope")

    user_id = payload.get('sub')
    if not user_id:
        raise AuthenticationError(message="User ID not found in token.")

    return models.TokenData(
        user_id=str(user_id),
        **{claim: payload.get(claim) for claim in IDENTITY_CLAIMS}
    )


def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> models.TokenData:
    """FastAPI dependency: rejects anonymous callers before any storage access."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError(message="Not authenticated")
    return verify_token(credentials.credentials)


CurrentUser = Annotated[models.TokenData, Depends(get_current_user)]


def get_current_member(current_user: CurrentUser, db: Session = Depends(get_db)) -> User:
    """
    The caller's user row, created from the token claims on first sight.

    Listings, cart rows and orders reference users.id, so any route that
    writes on behalf of the caller goes through here.
    """
    user = UserService.get_user(db, current_user.user_id)
    if user:
        return user
    logger.info(f"First request from {current_user.user_id}, creating user record")
    return UserService.upsert_user(db, current_user.to_upsert())


CurrentMember = Annotated[User, Depends(get_current_member)]
