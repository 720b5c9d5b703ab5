import uuid

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from ticketpro.db.session import SessionLocal
from ticketpro.core.app_logger import get_logger
from ticketpro.core.security import hash_password
from ticketpro.models.user import User
from ticketpro.models.country import Country
from ticketpro.models.airline import Airline
from ticketpro.models.system_setting import SystemSetting
from ticketpro.services.settings_service import DEFAULT_SETTINGS

log = get_logger("seed")

COUNTRIES = [
    ("KSA", "Saudi Arabia", "🇸🇦"),
    ("UAE", "United Arab Emirates", "🇦🇪"),
    ("QAT", "Qatar", "🇶🇦"),
    ("KWT", "Kuwait", "🇰🇼"),
    ("OMN", "Oman", "🇴🇲"),
    ("BHR", "Bahrain", "🇧🇭"),
    ("JOR", "Jordan", "🇯🇴"),
    ("LBN", "Lebanon", "🇱🇧"),
]

AIRLINES = [
    ("Air Arabia", "G9"),
    ("Emirates", "EK"),
    ("Qatar Airways", "QR"),
    ("Saudi Airlines", "SV"),
    ("Flydubai", "FZ"),
    ("Kuwait Airways", "KU"),
    ("Oman Air", "WY"),
    ("Gulf Air", "GF"),
]

USERS = [
    ("admin", "admin123", "admin", "System Administrator", "admin@bdticketpro.com"),
    ("manager", "manager123", "manager", "Sales Manager", "manager@bdticketpro.com"),
    ("staff", "staff123", "staff", "Sales Staff", "staff@bdticketpro.com"),
]


def ensure_user(db: Session, username: str, password: str, role: str, name: str, email: str):
    if db.query(User).filter(User.username == username).first():
        return
    db.add(User(
        id=str(uuid.uuid4()),
        username=username,
        password_hash=hash_password(password),
        name=name,
        email=email,
        role=role,
        status="active",
    ))


def run(db=None):
    """Insert reference data, default users and settings. Safe to run repeatedly."""
    own = db is None
    if own:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM users LIMIT 1"))
        except OperationalError:
            db.rollback()
            log.warning("users table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        for code, name, flag in COUNTRIES:
            if not db.get(Country, code):
                db.add(Country(code=code, name=name, flag=flag))

        for name, code in AIRLINES:
            if not db.query(Airline).filter(Airline.name == name).first():
                db.add(Airline(id=str(uuid.uuid4()), name=name, code=code))

        for username, password, role, name, email in USERS:
            ensure_user(db, username, password, role, name, email)

        for key, value in DEFAULT_SETTINGS.items():
            if not db.get(SystemSetting, key):
                db.add(SystemSetting(key=key, value=value))

        db.commit()
        log.info("seed complete")
    finally:
        if own:
            db.close()


if __name__ == "__main__":
    run()
