from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import get_current_user
from ticketpro.api.responses import ok
from ticketpro.api.serializers import user_out
from ticketpro.core.permissions import permissions_for
from ticketpro.models.user import User
from ticketpro.schemas.auth import LoginRequest
from ticketpro.services.user_service import authenticate

router = APIRouter(tags=["auth"])

@router.post("/auth/login")
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    token, user = authenticate(db, body.username, body.password, request)
    return ok({"token": token, "user": user_out(user)}, "Login successful")

@router.get("/auth/me")
def me(me: User = Depends(get_current_user)):
    """Current user plus the capabilities its role grants."""
    return ok({"user": user_out(me), "permissions": permissions_for(me.role)}, "User retrieved successfully")

@router.post("/auth/logout")
def logout(me: User = Depends(get_current_user)):
    # tokens are stateless; the client drops its copy
    return ok(message="Logout successful")
