from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from tripplanner.core.config import Settings
from tripplanner.core.errors import TokenMissing, TokenInvalid

REQUIRED_CLAIMS = ("sub", "email", "role", "exp")


class JWTManager:
    """Issues and verifies signed, expiring bearer tokens."""
    
    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_token_ttl = timedelta(days=settings.jwt_access_token_expire_days)
    
    def create_access_token(
        self,
        user_id: int,
        email: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a new access token carrying identity and role claims."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.access_token_ttl),
            "type": "access"
        }
        
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
    
    def verify_access_token(self, token: Optional[str]) -> Dict[str, Any]:
        """Verify and decode an access token.

        Raises ``TokenMissing`` when no token was presented and ``TokenInvalid``
        when the signature, expiry or claim set does not check out.
        """
        if not token:
            raise TokenMissing()
        
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise TokenInvalid()
        
        # Check token type and claim set
        if payload.get("type") != "access":
            raise TokenInvalid()
        if any(claim not in payload for claim in REQUIRED_CLAIMS):
            raise TokenInvalid()
        try:
            int(payload["sub"])
        except (TypeError, ValueError):
            raise TokenInvalid()
        
        return payload
