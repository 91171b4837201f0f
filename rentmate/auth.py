# auth.py
"""
Password hashing, JWT issue/verify and the FastAPI auth dependencies.

Tokens carry the user's ``id`` and ``role``; route handlers read both from
the decoded payload.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from passlib.context import CryptContext

from rentmate import config
from rentmate.exceptions import AuthenticationError

# Bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
     return pwd_context.verify(password, hashed)


def create_access_token(user_id: int, role: str, ttl_minutes: Optional[int] = None) -> str:
     ttl = ttl_minutes if ttl_minutes is not None else config.ACCESS_TOKEN_TTL_MINUTES
     expires = datetime.now(timezone.utc) + timedelta(minutes=ttl)
     payload = {"id": user_id, "role": role, "exp": expires}
     return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
     """Decoded payload of a valid token; AuthenticationError otherwise."""
     try:
          payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
     except JWTError as exc:
          raise AuthenticationError(f"Invalid token: {exc}") from exc
     if "id" not in payload:
          raise AuthenticationError("Invalid token: no user id")
     return payload


def authenticate_token(token: str) -> int:
     """User id for a push-channel connect frame."""
     return int(decode_token(token)["id"])


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          return decode_token(token)
     except AuthenticationError:
          raise HTTPException(status_code=403, detail="Invalid token")


def require_role(*roles: str):
     """Dependency factory: the token's role must be one of ``roles`` (admins always pass)."""
     allowed = set(roles) | {"admin"}

     def checker(token: dict = Depends(verify_token)) -> dict:
          if token.get("role") not in allowed:
               raise HTTPException(status_code=403, detail="Insufficient permissions")
          return token

     return checker
