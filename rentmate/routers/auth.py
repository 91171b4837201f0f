# routers/auth.py
"""
Registration, login and the current user.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rentmate.auth import create_access_token, hash_password, verify_password, verify_token
from rentmate.dependencies import get_clock, get_store
from rentmate.exceptions import DuplicateResourceError, NotFoundError, ValidationError
from rentmate.models import User, UserRole
from rentmate.repositories import Store
from rentmate.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(body: RegisterRequest, store: Store = Depends(get_store), clock=Depends(get_clock)):
     if body.role == UserRole.ADMIN:
          raise ValidationError("Admin accounts cannot be self-registered")
     email = body.email.strip().lower()
     if store.users.first(email=email) is not None:
          raise DuplicateResourceError("An account with this email already exists")

     user = User(
          email=email,
          password=hash_password(body.password),
          first_name=body.first_name,
          last_name=body.last_name,
          role=body.role,
          created_at=clock.now(),
     )
     store.users.add(user)
     logger.info("Registered user %s as %s", user.id, user.role.value)
     return user


@router.post("/login", response_model=TokenResponse)
def login_user(body: LoginRequest, store: Store = Depends(get_store)):
     user = store.users.first(email=body.email.strip().lower())
     if not user or not verify_password(body.password, user.password):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

     token = create_access_token(user.id, user.role.value)
     return {"token": token, "user": UserResponse.model_validate(user)}


@router.get("/users/me", response_model=UserResponse)
def current_user(store: Store = Depends(get_store), token: dict = Depends(verify_token)):
     user = store.users.get(token["id"])
     if user is None:
          raise NotFoundError("User", token["id"])
     return user
