"""Initial schema: rooms, bookings, receipts, promo codes, refund requests

Revision ID: initial_001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "initial_001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- rooms ---
    op.create_table(
        "rooms",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("category_type", sa.String(50)),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("breakfast_price", sa.Numeric(10, 2)),
        sa.Column("capacity", sa.Integer, server_default="2"),
        sa.Column("beds", sa.Integer, server_default="1"),
        sa.Column("bathrooms", sa.Integer, server_default="1"),
        sa.Column("amenities", JSONB, server_default="[]"),
        sa.Column("image_url", sa.String(500)),
        sa.Column("available_rooms", sa.Integer, server_default="0"),
        sa.Column("total_rooms", sa.Integer),
        sa.Column("is_available", sa.Boolean, server_default="true"),
        sa.Column("status", sa.String(20), server_default="available"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- bookings ---
    op.create_table(
        "bookings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("room_id", UUID(as_uuid=True), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(30)),
        sa.Column("customer_id", sa.String(100)),
        sa.Column("check_in_date", sa.Date, nullable=False),
        sa.Column("check_out_date", sa.Date, nullable=False),
        sa.Column("nights", sa.Integer, nullable=False),
        sa.Column("room_count", sa.Integer, server_default="1"),
        sa.Column("guests", sa.Integer, nullable=False),
        sa.Column("adults", sa.Integer, nullable=False),
        sa.Column("children", sa.Integer, server_default="0"),
        sa.Column("children_ages", JSONB, server_default="[]"),
        sa.Column("effective_adults", sa.Integer, nullable=False),
        sa.Column("with_breakfast", sa.Boolean, server_default="false"),
        sa.Column("special_requests", sa.Text),
        sa.Column("nightly_rate", sa.Numeric(12, 2), nullable=False),
        sa.Column("room_subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("extra_guests", sa.Integer),
        sa.Column("extra_guest_charges", sa.Numeric(12, 2)),
        sa.Column("breakfast_rate", sa.Numeric(12, 2)),
        sa.Column("breakfast_charge", sa.Numeric(12, 2), server_default="0"),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discounted_base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("promo_code", sa.String(50)),
        sa.Column("cgst", sa.Numeric(12, 2), nullable=False),
        sa.Column("sgst", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("original_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), server_default="pending"),
        sa.Column("payment_status", sa.String(20), server_default="pending"),
        sa.Column("booking_type", sa.String(10), server_default="online"),
        sa.Column("payment_id", sa.String(100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_bookings_room", "bookings", ["room_id"])
    op.create_index("idx_bookings_status", "bookings", ["status", "created_at"])

    # --- receipts ---
    op.create_table(
        "receipts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("booking_id", UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("receipt_number", sa.String(30), nullable=False),
        sa.Column("payment_id", sa.String(100)),
        sa.Column("price_per_night", sa.Numeric(12, 2), nullable=False),
        sa.Column("nights", sa.Integer, nullable=False),
        sa.Column("room_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("breakfast_price", sa.Numeric(12, 2)),
        sa.Column("breakfast_total", sa.Numeric(12, 2), server_default="0"),
        sa.Column("extra_guests", sa.Integer),
        sa.Column("extra_guest_charges", sa.Numeric(12, 2)),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("cgst", sa.Numeric(12, 2), nullable=False),
        sa.Column("sgst", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("with_breakfast", sa.Boolean, server_default="false"),
        sa.Column("receipt_data", JSONB),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_receipts_booking", "receipts", ["booking_id"])
    op.create_index("idx_receipts_number", "receipts", ["receipt_number"], unique=True)

    # --- promo_codes ---
    op.create_table(
        "promo_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("discount_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("expiry_date", sa.Date),
        sa.Column("max_uses", sa.Integer),
        sa.Column("current_uses", sa.Integer, server_default="0"),
        sa.Column("status", sa.String(20), server_default="active"),
        sa.Column("created_by", sa.String(100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_promo_codes_code", "promo_codes", ["code"], unique=True)

    # --- promo_code_usage ---
    op.create_table(
        "promo_code_usage",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("promo_code_id", UUID(as_uuid=True), sa.ForeignKey("promo_codes.id"), nullable=False),
        sa.Column("customer_id", sa.String(100), nullable=False),
        sa.Column("device_id", sa.String(100)),
        sa.Column("booking_id", UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="SET NULL")),
        sa.Column("original_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("final_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_promo_usage_code", "promo_code_usage", ["promo_code_id"])
    op.create_index("idx_promo_usage_customer", "promo_code_usage", ["promo_code_id", "customer_id"])

    # --- refund_requests ---
    op.create_table(
        "refund_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("ticket_id", sa.String(30), nullable=False),
        sa.Column("booking_id", UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE")),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_id", sa.String(100)),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), server_default="pending"),
        sa.Column("admin_notes", sa.Text),
        sa.Column("super_admin_notes", sa.Text),
        sa.Column("refund_id", sa.String(100)),
        sa.Column("refund_status", sa.String(30)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_refund_requests_ticket", "refund_requests", ["ticket_id"], unique=True)
    op.create_index("idx_refund_requests_booking", "refund_requests", ["booking_id"])


def downgrade() -> None:
    op.drop_table("refund_requests")
    op.drop_table("promo_code_usage")
    op.drop_table("promo_codes")
    op.drop_table("receipts")
    op.drop_table("bookings")
    op.drop_table("rooms")
