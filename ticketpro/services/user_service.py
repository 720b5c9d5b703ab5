from fastapi import Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ticketpro.core.security import create_access_token, hash_password, verify_password
from ticketpro.models.user import User
from ticketpro.repositories.users import UserRepository
from ticketpro.services.audit_service import log_activity

log = get_logger("users")


def authenticate(db: Session, username: str, password: str, request: Request | None = None) -> tuple[str, User]:
    repo = UserRepository(db)
    user = repo.get_by_username(username)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid username or password")
    if not user.is_active:
        raise AuthenticationError("Account is inactive")
    repo.touch_last_login(user)
    log_activity(db, user.id, "login", "user", user.id, None, request)
    db.commit()
    db.refresh(user)
    return create_access_token(user.id, user.role), user


def create_user(db: Session, me: User, data: dict, request: Request | None = None) -> User:
    repo = UserRepository(db)
    if repo.get_by_username(data["username"]):
        raise ConflictError("Username already exists")
    user = repo.create(
        username=data["username"],
        password_hash=hash_password(data["password"]),
        name=data["name"],
        role=data["role"],
        email=data.get("email"),
        phone=data.get("phone"),
        status=data.get("status") or "active",
    )
    log_activity(db, me.id, "create_user", "user", user.id, {"username": user.username, "role": user.role}, request)
    db.commit()
    db.refresh(user)
    log.info("user %s (%s) created by %s", user.username, user.role, me.username)
    return user


def update_user(db: Session, me: User, user_id: str, data: dict, request: Request | None = None) -> User:
    repo = UserRepository(db)
    user = repo.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.id == me.id and (data.get("role") not in (None, me.role) or data.get("status") == "inactive"):
        raise ValidationError("You cannot change your own role or deactivate yourself")
    password = data.pop("password", None)
    if password:
        data["password_hash"] = hash_password(password)
    repo.update(user, **data)
    log_activity(db, me.id, "update_user", "user", user.id,
                 {k: v for k, v in data.items() if k != "password_hash"}, request)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, me: User, user_id: str, request: Request | None = None) -> None:
    repo = UserRepository(db)
    user = repo.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.id == me.id:
        raise ValidationError("You cannot delete your own account")
    username = user.username
    try:
        repo.delete(user)
        log_activity(db, me.id, "delete_user", "user", user_id, {"username": username}, request)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User has recorded activity and cannot be deleted; deactivate the account instead")


def update_profile(db: Session, me: User, data: dict, request: Request | None = None) -> User:
    UserRepository(db).update(me, **data)
    log_activity(db, me.id, "update_profile", "user", me.id, data, request)
    db.commit()
    db.refresh(me)
    return me


def change_password(db: Session, me: User, current_password: str, new_password: str,
                    request: Request | None = None) -> None:
    if not verify_password(current_password, me.password_hash):
        raise ValidationError("Current password is incorrect")
    if len(new_password) < 6:
        raise ValidationError("Password must be at least 6 characters")
    UserRepository(db).update(me, password_hash=hash_password(new_password))
    log_activity(db, me.id, "change_password", "user", me.id, None, request)
    db.commit()
