"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return cols


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=80), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin','manager','staff')", name="ck_users_role"),
        sa.CheckConstraint("status IN ('active','inactive')", name="ck_users_status"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "countries",
        sa.Column("code", sa.String(length=3), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("flag", sa.String(length=16), nullable=False, server_default=""),
        *_timestamps(updated=False),
    )

    op.create_table(
        "airlines",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=3), nullable=True, unique=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_airlines_name", "airlines", ["name"], unique=True)

    op.create_table(
        "ticket_batches",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("country_code", sa.String(length=3), sa.ForeignKey("countries.code"), nullable=False),
        sa.Column("airline_name", sa.String(length=120), nullable=False),
        sa.Column("flight_date", sa.String(length=10), nullable=False),
        sa.Column("flight_time", sa.String(length=5), nullable=False),
        sa.Column("buying_price", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("agent_name", sa.String(length=200), nullable=False),
        sa.Column("agent_contact", sa.String(length=120), nullable=True),
        sa.Column("agent_address", sa.String(length=500), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("document_url", sa.String(length=512), nullable=True),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_ticket_batches_country_code", "ticket_batches", ["country_code"])
    op.create_index("ix_ticket_batches_flight_date", "ticket_batches", ["flight_date"])

    op.create_table(
        "tickets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("batch_id", sa.String(length=36), sa.ForeignKey("ticket_batches.id"), nullable=False),
        sa.Column("flight_number", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=12), nullable=False, server_default="available"),
        sa.Column("selling_price", sa.Integer(), nullable=False),
        sa.Column("aircraft", sa.String(length=60), nullable=True),
        sa.Column("terminal", sa.String(length=30), nullable=True),
        sa.Column("arrival_time", sa.String(length=5), nullable=True),
        sa.Column("duration", sa.String(length=20), nullable=True),
        sa.Column("available_seats", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_seats", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sold_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("sold_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('available','booked','locked','sold')", name="ck_tickets_status"),
    )
    op.create_index("ix_tickets_batch_id", "tickets", ["batch_id"])
    op.create_index("ix_tickets_status", "tickets", ["status"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("ticket_id", sa.String(length=36), sa.ForeignKey("tickets.id"), nullable=False),
        sa.Column("agent_name", sa.String(length=200), nullable=False),
        sa.Column("agent_phone", sa.String(length=40), nullable=True),
        sa.Column("agent_email", sa.String(length=320), nullable=True),
        sa.Column("passenger_name", sa.String(length=200), nullable=False),
        sa.Column("passenger_passport", sa.String(length=40), nullable=False),
        sa.Column("passenger_phone", sa.String(length=40), nullable=False),
        sa.Column("passenger_email", sa.String(length=320), nullable=True),
        sa.Column("pax_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("selling_price", sa.Integer(), nullable=False),
        sa.Column("payment_type", sa.String(length=10), nullable=False),
        sa.Column("partial_amount", sa.Integer(), nullable=True),
        sa.Column("payment_method", sa.String(length=40), nullable=False, server_default="cash"),
        sa.Column("payment_details", sa.Text(), nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=12), nullable=False, server_default="pending"),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("payment_type IN ('full','partial')", name="ck_bookings_payment_type"),
        sa.CheckConstraint("status IN ('pending','confirmed','cancelled','expired')", name="ck_bookings_status"),
    )
    op.create_index("ix_bookings_ticket_id", "bookings", ["ticket_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_created_by", "bookings", ["created_by"])

    op.create_table(
        "system_settings",
        sa.Column("key", sa.String(length=80), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("action", sa.String(length=80), nullable=False),
        sa.Column("entity_type", sa.String(length=40), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])
    op.create_index("ix_activity_logs_entity_type", "activity_logs", ["entity_type"])
    op.create_index("ix_activity_logs_entity_id", "activity_logs", ["entity_id"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])

    op.create_table(
        "umrah_with_transport",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("passenger_name", sa.String(length=200), nullable=False),
        sa.Column("pnr", sa.String(length=20), nullable=False),
        sa.Column("passport_number", sa.String(length=40), nullable=False),
        sa.Column("flight_airline_name", sa.String(length=120), nullable=False),
        sa.Column("departure_date", sa.String(length=10), nullable=False),
        sa.Column("return_date", sa.String(length=10), nullable=False),
        sa.Column("approved_by", sa.String(length=200), nullable=False),
        sa.Column("reference_agency", sa.String(length=200), nullable=False),
        sa.Column("emergency_flight_contact", sa.String(length=120), nullable=False),
        sa.Column("passenger_mobile", sa.String(length=40), nullable=False),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_umrah_with_transport_passenger_name", "umrah_with_transport", ["passenger_name"])
    op.create_index("ix_umrah_with_transport_passport_number", "umrah_with_transport", ["passport_number"])
    op.create_index("ix_umrah_with_transport_departure_date", "umrah_with_transport", ["departure_date"])

    op.create_table(
        "umrah_without_transport",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("flight_departure_date", sa.String(length=10), nullable=False),
        sa.Column("return_date", sa.String(length=10), nullable=False),
        sa.Column("passenger_name", sa.String(length=200), nullable=False),
        sa.Column("passport_number", sa.String(length=40), nullable=False),
        sa.Column("entry_recorded_by", sa.String(length=200), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        sa.Column("amount_paid", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("remaining_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_payment_date", sa.String(length=10), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_umrah_without_transport_flight_departure_date", "umrah_without_transport", ["flight_departure_date"])
    op.create_index("ix_umrah_without_transport_passenger_name", "umrah_without_transport", ["passenger_name"])
    op.create_index("ix_umrah_without_transport_passport_number", "umrah_without_transport", ["passport_number"])
    op.create_index("ix_umrah_without_transport_remaining_amount", "umrah_without_transport", ["remaining_amount"])

    op.create_table(
        "umrah_group_tickets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("group_name", sa.String(length=200), nullable=False),
        sa.Column("package_type", sa.String(length=20), nullable=False, server_default="with-transport"),
        sa.Column("departure_date", sa.String(length=10), nullable=False),
        sa.Column("return_date", sa.String(length=10), nullable=False),
        sa.Column("ticket_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_cost_per_ticket", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("agent_name", sa.String(length=200), nullable=False),
        sa.Column("agent_contact", sa.String(length=120), nullable=True),
        sa.Column("purchase_notes", sa.Text(), nullable=True),
        sa.Column("departure_airline", sa.String(length=120), nullable=True),
        sa.Column("departure_flight_number", sa.String(length=20), nullable=True),
        sa.Column("departure_time", sa.String(length=5), nullable=True),
        sa.Column("departure_route", sa.String(length=120), nullable=True),
        sa.Column("return_airline", sa.String(length=120), nullable=True),
        sa.Column("return_flight_number", sa.String(length=20), nullable=True),
        sa.Column("return_time", sa.String(length=5), nullable=True),
        sa.Column("return_route", sa.String(length=120), nullable=True),
        sa.Column("remaining_tickets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("package_type IN ('with-transport','without-transport')", name="ck_group_tickets_package_type"),
    )
    op.create_index("ix_umrah_group_tickets_group_name", "umrah_group_tickets", ["group_name"])
    op.create_index("ix_umrah_group_tickets_package_type", "umrah_group_tickets", ["package_type"])
    op.create_index("ix_umrah_group_tickets_departure_date", "umrah_group_tickets", ["departure_date"])

    op.create_table(
        "umrah_group_bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("group_ticket_id", sa.String(length=36), sa.ForeignKey("umrah_group_tickets.id"), nullable=False),
        sa.Column("passenger_id", sa.String(length=36), nullable=False),
        sa.Column("passenger_type", sa.String(length=20), nullable=False),
        sa.Column("assigned_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("passenger_id", "passenger_type", name="uq_group_booking_passenger"),
    )
    op.create_index("ix_umrah_group_bookings_group_ticket_id", "umrah_group_bookings", ["group_ticket_id"])


def downgrade() -> None:
    for table in (
        "umrah_group_bookings",
        "umrah_group_tickets",
        "umrah_without_transport",
        "umrah_with_transport",
        "activity_logs",
        "system_settings",
        "bookings",
        "tickets",
        "ticket_batches",
        "airlines",
        "countries",
        "users",
    ):
        op.drop_table(table)
