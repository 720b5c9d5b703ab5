from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.core.errors import AuthenticationError, AuthorizationError
from ticketpro.core.permissions import Permission, has_permission
from ticketpro.core.security import decode_token
from ticketpro.models.user import User

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise AuthenticationError("Access token required")
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
    user = db.get(User, payload.get("sub"))
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user

def require_permission(*permissions: Permission):
    """Dependency guard: the caller's role must hold every listed capability."""
    def _guard(user: User = Depends(get_current_user)) -> User:
        for p in permissions:
            if not has_permission(user.role, p):
                raise AuthorizationError("Insufficient permissions")
        return user
    return _guard
