"""Response shapes shared by several routers.

Entity fields stay snake_case like the columns; the nested agentInfo and
passengerInfo blocks mirror the booking request body.
"""
import json

from ticketpro.core.permissions import Permission, has_permission
from ticketpro.core.timeutil import iso


def user_out(u) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "name": u.name,
        "email": u.email,
        "phone": u.phone,
        "role": u.role,
        "status": u.status,
        "last_login": iso(u.last_login),
        "created_at": iso(u.created_at),
        "updated_at": iso(u.updated_at),
    }


def country_out(c) -> dict:
    return {"code": c.code, "name": c.name, "flag": c.flag}


def batch_out(b, role: str) -> dict:
    out = {
        "id": b.id,
        "country_code": b.country_code,
        "airline_name": b.airline_name,
        "flight_date": b.flight_date,
        "flight_time": b.flight_time,
        "quantity": b.quantity,
        "agent_name": b.agent_name,
        "agent_contact": b.agent_contact,
        "agent_address": b.agent_address,
        "remarks": b.remarks,
        "document_url": b.document_url,
        "created_by": b.created_by,
        "created_at": iso(b.created_at),
    }
    if has_permission(role, Permission.VIEW_BUYING_PRICE):
        out["buying_price"] = b.buying_price
    return out


def ticket_out(t, batch=None, country=None, role: str | None = None) -> dict:
    out = {
        "id": t.id,
        "batch_id": t.batch_id,
        "flight_number": t.flight_number,
        "status": t.status,
        "selling_price": t.selling_price,
        "aircraft": t.aircraft,
        "terminal": t.terminal,
        "arrival_time": t.arrival_time,
        "duration": t.duration,
        "available_seats": t.available_seats,
        "total_seats": t.total_seats,
        "locked_until": iso(t.locked_until),
        "sold_by": t.sold_by,
        "sold_at": iso(t.sold_at),
        "created_at": iso(t.created_at),
        "updated_at": iso(t.updated_at),
    }
    if batch is not None:
        out["batch"] = {
            "id": batch.id,
            "country_code": batch.country_code,
            "airline_name": batch.airline_name,
            "flight_date": batch.flight_date,
            "flight_time": batch.flight_time,
            "agent_name": batch.agent_name,
        }
        if role and has_permission(role, Permission.VIEW_BUYING_PRICE):
            out["batch"]["buying_price"] = batch.buying_price
    if country is not None:
        out["country"] = country_out(country)
    return out


def booking_out(b) -> dict:
    return {
        "id": b.id,
        "ticket_id": b.ticket_id,
        "agentInfo": {"name": b.agent_name, "phone": b.agent_phone, "email": b.agent_email},
        "passengerInfo": {
            "name": b.passenger_name,
            "passportNo": b.passenger_passport,
            "phone": b.passenger_phone,
            "email": b.passenger_email,
            "paxCount": b.pax_count,
        },
        "selling_price": b.selling_price,
        "payment_type": b.payment_type,
        "partial_amount": b.partial_amount,
        "payment_method": b.payment_method,
        "payment_details": json.loads(b.payment_details) if b.payment_details else None,
        "comments": b.comments,
        "status": b.status,
        "created_by": b.created_by,
        "confirmed_at": iso(b.confirmed_at),
        "expires_at": iso(b.expires_at),
        "created_at": iso(b.created_at),
        "updated_at": iso(b.updated_at),
    }


def row_out(row) -> dict:
    """Plain column dump for the Umrah tables."""
    out = {}
    for col in row.__table__.columns:
        v = getattr(row, col.name)
        out[col.name] = iso(v) if hasattr(v, "isoformat") else v
    return out


def activity_out(a) -> dict:
    return {
        "id": a.id,
        "user_id": a.user_id,
        "action": a.action,
        "entity_type": a.entity_type,
        "entity_id": a.entity_id,
        "details": a.details,
        "ip_address": a.ip_address,
        "user_agent": a.user_agent,
        "created_at": iso(a.created_at),
    }
