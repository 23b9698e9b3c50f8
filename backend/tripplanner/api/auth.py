import logging
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from tripplanner.core.database import get_db
from tripplanner.core.errors import ConflictError, InvalidCredentials
from tripplanner.models import User
from tripplanner.auth.jwt_manager import JWTManager
from tripplanner.auth.password import PasswordManager, MAX_PASSWORD_BYTES
from tripplanner.auth.middleware import (
    CurrentUser,
    get_current_user,
    get_jwt_manager,
    get_password_manager,
)
from tripplanner.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

MIN_PASSWORD_LENGTH = 6


class SignupRequest(BaseModel):
    # Passwords are taken verbatim; only name and email are trimmed
    model_config = ConfigDict(extra="forbid")

    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
    password_manager: PasswordManager = Depends(get_password_manager),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
):
    """Register a new user and return a bearer token."""
    
    # Check if user already exists
    existing_user = db.query(User).filter(User.email == request.email).first()
    if existing_user:
        raise ConflictError("Email already registered")
    
    user = User(
        name=request.name,
        email=request.email,
        hashed_password=password_manager.hash_password(request.password)
    )
    
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)
    
    logger.info("User registered", extra={"user_id": user.id})
    
    token = jwt_manager.create_access_token(user.id, user.email, user.role)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    password_manager: PasswordManager = Depends(get_password_manager),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
):
    """Authenticate user and return a bearer token."""
    
    # Unknown email and wrong password are indistinguishable to the caller
    user = db.query(User).filter(User.email == request.email).first()
    if not user:
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()
    
    if not password_manager.verify_password(request.password, user.hashed_password):
        logger.info("Login failed: bad password", extra={"user_id": user.id})
        raise InvalidCredentials()
    
    # Check if password needs rehashing
    if password_manager.needs_rehash(user.hashed_password):
        user.hashed_password = password_manager.hash_password(request.password)
        db.commit()
        db.refresh(user)
    
    token = jwt_manager.create_access_token(user.id, user.email, user.role)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user)
    )


@router.get("/me")
async def get_current_user_info(current_user: CurrentUser = Depends(get_current_user)):
    """Identity carried by the presented token."""
    return {
        "id": current_user.user_id,
        "email": current_user.email,
        "role": current_user.role
    }
