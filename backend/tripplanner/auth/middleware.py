from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from tripplanner.auth.jwt_manager import JWTManager
from tripplanner.auth.password import PasswordManager
from tripplanner.core.config import Settings
from tripplanner.core.errors import PermissionDenied

# Security scheme for FastAPI; missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """Context class to hold the identity carried by a verified token."""
    def __init__(self, user_id: int, email: str, role: str):
        self.user_id = user_id
        self.email = email
        self.role = role
    
    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_password_manager(request: Request) -> PasswordManager:
    return request.app.state.password_manager


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
) -> CurrentUser:
    """Dependency to get the current authenticated user."""
    token = credentials.credentials if credentials else None
    
    # Raises TokenMissing / TokenInvalid
    payload = jwt_manager.verify_access_token(token)
    
    return CurrentUser(
        user_id=int(payload["sub"]),
        email=payload["email"],
        role=payload["role"]
    )


def require_role(required_role: str):
    """Factory function to create a role requirement dependency."""
    async def role_dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role != required_role:
            raise PermissionDenied(f"{required_role.capitalize()} access required")
        return current_user
    return role_dependency


require_admin = require_role("admin")
