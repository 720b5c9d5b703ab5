from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError

from ticketpro.core.app_logger import get_logger
from ticketpro.db.session import SessionLocal
from ticketpro.services import expiry_service

log = get_logger("worker")


def expire_holds():
    db: Session = SessionLocal()
    try:
        try:
            return expiry_service.expire_holds(db)
        except OperationalError:
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            log.warning("expire_holds skipped: tables missing")
            return {"skipped": True, "reason": "missing_tables"}
    finally:
        db.close()


def reconcile_group_tickets():
    db: Session = SessionLocal()
    try:
        try:
            return {"fixed": expiry_service.reconcile_group_tickets(db)}
        except OperationalError:
            db.rollback()
            log.warning("reconcile_group_tickets skipped: tables missing")
            return {"skipped": True, "reason": "missing_tables"}
    finally:
        db.close()
