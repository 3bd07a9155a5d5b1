"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(15), nullable=True),
        sa.Column("role", sa.Enum("admin", "staff", "customer", name="user_role"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    # Menu items table
    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "category",
            sa.Enum("appetizer", "main_course", "dessert", "beverage", "snack", "special", name="menu_category"),
            nullable=False,
        ),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("preparation_time", sa.Integer(), nullable=True),
        *_timestamps(),
    )

    # Stock items table
    op.create_table(
        "stock_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ingredient_name", sa.String(100), nullable=False, index=True),
        sa.Column(
            "category",
            sa.Enum(
                "dairy", "meat", "vegetable", "fruit", "grain", "spice", "beverage", "other",
                name="stock_category",
            ),
            nullable=False,
        ),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit", sa.Enum("kg", "g", "l", "ml", "pieces", "packets", name="stock_unit"), nullable=False),
        sa.Column("minimum_stock", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("supplier", sa.String(100), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("in_stock", "low_stock", "out_of_stock", name="stock_status"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )

    # Orders table
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(20), unique=True, nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True, index=True),
        sa.Column("customer_name", sa.String(100), nullable=False),
        sa.Column("order_type", sa.Enum("dine-in", "takeaway", "online", name="order_type"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "preparing", "ready", "completed", "cancelled", name="order_status"),
            nullable=False,
            index=True,
        ),
        sa.Column("table_number", sa.Integer(), nullable=True),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Order items table
    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False, index=True),
        sa.Column("item_name", sa.String(100), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("special_instructions", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("payment_number", sa.String(20), unique=True, nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False, index=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("tax", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.Enum("cash", "card", "online", name="payment_method"), nullable=False),
        sa.Column(
            "payment_status",
            sa.Enum("pending", "completed", "refunded", "failed", name="payment_status"),
            nullable=False,
            index=True,
        ),
        sa.Column("paid_by", sa.String(100), nullable=True),
        *_timestamps(),
    )

    # Invoices table
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(20), unique=True, nullable=False),
        sa.Column("payment_id", sa.Integer(), sa.ForeignKey("payments.id"), nullable=False, index=True),
        sa.Column("customer_name", sa.String(100), nullable=False),
        sa.Column("customer_email", sa.String(100), nullable=True),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("tax", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False),
        sa.Column("grand_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("invoice_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("draft", "sent", "paid", "cancelled", name="invoice_status"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )

    # Cafe tables table
    op.create_table(
        "cafe_tables",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("table_number", sa.Integer(), unique=True, nullable=False),
        sa.Column("seating_capacity", sa.Integer(), nullable=False),
        sa.Column("location", sa.Enum("indoor", "outdoor", "vip", "balcony", name="table_location"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("available", "occupied", "reserved", "maintenance", name="table_status"),
            nullable=False,
            index=True,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Reservations table
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reservation_number", sa.String(20), unique=True, nullable=False),
        sa.Column("table_id", sa.Integer(), sa.ForeignKey("cafe_tables.id"), nullable=False, index=True),
        sa.Column("customer_name", sa.String(100), nullable=False),
        sa.Column("customer_phone", sa.String(15), nullable=False),
        sa.Column("customer_email", sa.String(100), nullable=True),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False, index=True),
        sa.Column("reservation_time", sa.Time(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("confirmed", "pending", "cancelled", "completed", "no_show", name="reservation_status"),
            nullable=False,
            index=True,
        ),
        sa.Column("special_requests", sa.Text(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("reservations")
    op.drop_table("cafe_tables")
    op.drop_table("invoices")
    op.drop_table("payments")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("stock_items")
    op.drop_table("menu_items")
    op.drop_table("users")
