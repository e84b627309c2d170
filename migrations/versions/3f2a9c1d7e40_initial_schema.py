"""Initial schema

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-18 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ----- Users -----
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        sa.Column("wallet_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("point_balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_developer", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # ----- Games -----
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=120), nullable=False, unique=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("genre", sa.String(length=60), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Available"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ----- Items -----
    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("game_id", sa.Integer(), sa.ForeignKey("games.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_listed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_items_game_id", "items", ["game_id"])
    op.create_index("ix_items_is_listed", "items", ["is_listed"])

    # ----- Ownership (one row per item) -----
    op.create_table(
        "user_inventory",
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id", ondelete="RESTRICT"), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("game_id", sa.Integer(), sa.ForeignKey("games.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("acquired_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_inventory_user_game", "user_inventory", ["user_id", "game_id"])

    # ----- Trades -----
    tradestatus = sa.Enum("Pending", "Completed", "Declined", name="tradestatus")
    op.create_table(
        "item_trades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("source_user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("destination_user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("game_id", sa.Integer(), sa.ForeignKey("games.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", tradestatus, nullable=False, server_default="Pending"),
        sa.Column("accepted_by_source", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("accepted_by_destination", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("source_user_id <> destination_user_id", name="ck_item_trades_distinct_parties"),
        sa.CheckConstraint(
            "status <> 'Completed' OR (accepted_by_source AND accepted_by_destination)",
            name="ck_item_trades_completed_accepted",
        ),
    )
    op.create_index("ix_item_trades_id", "item_trades", ["id"])
    op.create_index("ix_item_trades_source_user_id", "item_trades", ["source_user_id"])
    op.create_index("ix_item_trades_destination_user_id", "item_trades", ["destination_user_id"])
    op.create_index("ix_item_trades_status", "item_trades", ["status"])
    op.create_index("ix_item_trades_created_at", "item_trades", ["created_at"])
    op.create_index("ix_item_trades_status_created", "item_trades", ["status", "created_at"])

    # ----- Trade details (items per side) -----
    op.create_table(
        "item_trade_details",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trade_id", sa.Integer(), sa.ForeignKey("item_trades.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("is_source_user_item", sa.Boolean(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("trade_id", "item_id", name="uq_item_trade_details_trade_item"),
    )
    op.create_index("ix_item_trade_details_id", "item_trade_details", ["id"])
    op.create_index("ix_item_trade_details_item_id", "item_trade_details", ["item_id"])


def downgrade() -> None:
    op.drop_table("item_trade_details")
    op.drop_table("item_trades")
    sa.Enum(name="tradestatus").drop(op.get_bind(), checkfirst=True)
    op.drop_table("user_inventory")
    op.drop_table("items")
    op.drop_table("games")
    op.drop_table("users")
