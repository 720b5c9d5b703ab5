from __future__ import annotations

import uuid
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ticketpro.core.timeutil import utcnow
from ticketpro.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def list(self, role: str | None = None, q: str | None = None) -> list[User]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        if q:
            ql = f"%{q.lower()}%"
            query = query.filter(or_(func.lower(User.username).like(ql), func.lower(User.name).like(ql)))
        return query.order_by(User.created_at.desc()).all()

    def create(self, username: str, password_hash: str, name: str, role: str,
               email: str | None = None, phone: str | None = None, status: str = "active") -> User:
        u = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hash,
            name=name,
            email=email,
            phone=phone,
            role=role,
            status=status,
        )
        self.db.add(u)
        self.db.flush()
        return u

    def update(self, user: User, **fields) -> User:
        for k, v in fields.items():
            if v is not None:
                setattr(user, k, v)
        self.db.flush()
        return user

    def touch_last_login(self, user: User) -> None:
        user.last_login = utcnow()
        self.db.flush()

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.flush()
