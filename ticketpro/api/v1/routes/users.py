from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import get_current_user, require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import user_out
from ticketpro.core.errors import NotFoundError
from ticketpro.core.permissions import Permission
from ticketpro.models.user import User
from ticketpro.repositories.users import UserRepository
from ticketpro.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserUpdate
from ticketpro.services import user_service

router = APIRouter(tags=["users"])

# profile routes come first so "profile" is never taken for a user id

@router.put("/users/profile/me")
def update_profile(body: ProfileUpdate, request: Request, db: Session = Depends(get_db),
                   me: User = Depends(get_current_user)):
    user = user_service.update_profile(db, me, body.model_dump(exclude_unset=True), request)
    return ok({"user": user_out(user)}, "Profile updated successfully")

@router.put("/users/profile/password")
def change_password(body: PasswordChange, request: Request, db: Session = Depends(get_db),
                    me: User = Depends(get_current_user)):
    user_service.change_password(db, me, body.currentPassword, body.newPassword, request)
    return ok(message="Password changed successfully")

@router.get("/users")
def list_users(role: str | None = None, q: str | None = None, db: Session = Depends(get_db),
               me: User = Depends(require_permission(Permission.MANAGE_USERS))):
    return ok({"users": [user_out(u) for u in UserRepository(db).list(role=role, q=q)]},
              "Users retrieved successfully")

@router.get("/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db),
             me: User = Depends(require_permission(Permission.MANAGE_USERS))):
    user = UserRepository(db).get(user_id)
    if not user:
        raise NotFoundError("User not found")
    return ok({"user": user_out(user)}, "User retrieved successfully")

@router.post("/users", status_code=201)
def create_user(body: UserCreate, request: Request, db: Session = Depends(get_db),
                me: User = Depends(require_permission(Permission.MANAGE_USERS))):
    user = user_service.create_user(db, me, body.model_dump(), request)
    return ok({"user": user_out(user)}, "User created successfully")

@router.put("/users/{user_id}")
def update_user(user_id: str, body: UserUpdate, request: Request, db: Session = Depends(get_db),
                me: User = Depends(require_permission(Permission.MANAGE_USERS))):
    user = user_service.update_user(db, me, user_id, body.model_dump(exclude_unset=True), request)
    return ok({"user": user_out(user)}, "User updated successfully")

@router.delete("/users/{user_id}")
def delete_user(user_id: str, request: Request, db: Session = Depends(get_db),
                me: User = Depends(require_permission(Permission.MANAGE_USERS))):
    user_service.delete_user(db, me, user_id, request)
    return ok(message="User deleted successfully")
