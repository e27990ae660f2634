"""initial schema

Revision ID: 20250115_0001
Revises:
Create Date: 2025-01-15
"""

from alembic import op
import sqlalchemy as sa

revision = "20250115_0001"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLE = sa.Enum("admin", "commander", "logistics", name="userrole")
PERSONNEL_STATUS = sa.Enum("active", "inactive", "transferred", name="personnelstatus")
TRANSFER_STATUS = sa.Enum("pending", "in_transit", "completed", "cancelled", name="transferstatus")
ASSIGNMENT_STATUS = sa.Enum("active", "returned", "lost", "damaged", name="assignmentstatus")


def upgrade():
    op.create_table(
        "bases",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("commander_name", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "equipment_types",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False, server_default="unit"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "personnel",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("rank", sa.String(length=50), nullable=True),
        sa.Column("unit", sa.String(length=100), nullable=True),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", PERSONNEL_STATUS, nullable=False, server_default="active"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index("idx_users_role", "users", ["role"], unique=False)
    op.create_index("idx_users_base", "users", ["base_id"], unique=False)

    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_type_id", sa.Integer(), sa.ForeignKey("equipment_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("base_id", "equipment_type_id", name="uq_assets_base_equipment"),
        sa.CheckConstraint("quantity >= 0", name="ck_assets_quantity_non_negative"),
    )
    op.create_index("idx_assets_base", "assets", ["base_id"], unique=False)

    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_type_id", sa.Integer(), sa.ForeignKey("equipment_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("supplier", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        sa.CheckConstraint("cost >= 0", name="ck_purchases_cost_non_negative"),
    )
    op.create_index("idx_purchases_base", "purchases", ["base_id"], unique=False)
    op.create_index("idx_purchases_date", "purchases", ["purchase_date"], unique=False)

    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("from_base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("to_base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_type_id", sa.Integer(), sa.ForeignKey("equipment_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("transfer_date", sa.Date(), nullable=False),
        sa.Column("status", TRANSFER_STATUS, nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("approved_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("from_base_id <> to_base_id", name="ck_transfers_distinct_bases"),
        sa.CheckConstraint("quantity > 0", name="ck_transfers_quantity_positive"),
    )
    op.create_index("idx_transfers_from", "transfers", ["from_base_id"], unique=False)
    op.create_index("idx_transfers_to", "transfers", ["to_base_id"], unique=False)
    op.create_index("idx_transfers_status", "transfers", ["status"], unique=False)
    op.create_index("idx_transfers_date", "transfers", ["transfer_date"], unique=False)

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_type_id", sa.Integer(), sa.ForeignKey("equipment_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("personnel_id", sa.Integer(), sa.ForeignKey("personnel.id", ondelete="CASCADE"), nullable=False),
        sa.Column("serial_number", sa.String(length=100), nullable=True),
        sa.Column("assignment_date", sa.Date(), nullable=False),
        sa.Column("return_date", sa.Date(), nullable=True),
        sa.Column("status", ASSIGNMENT_STATUS, nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_assignments_base", "assignments", ["base_id"], unique=False)
    op.create_index("idx_assignments_personnel", "assignments", ["personnel_id"], unique=False)
    op.create_index("idx_assignments_status", "assignments", ["status"], unique=False)
    op.create_index("idx_assignments_date", "assignments", ["assignment_date"], unique=False)

    op.create_table(
        "expenditures",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("base_id", sa.Integer(), sa.ForeignKey("bases.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_type_id", sa.Integer(), sa.ForeignKey("equipment_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("expenditure_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quantity > 0", name="ck_expenditures_quantity_positive"),
    )
    op.create_index("idx_expenditures_base", "expenditures", ["base_id"], unique=False)
    op.create_index("idx_expenditures_date", "expenditures", ["expenditure_date"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_audit_logs_user_id"), "audit_logs", ["user_id"], unique=False)
    op.create_index(op.f("ix_audit_logs_timestamp"), "audit_logs", ["timestamp"], unique=False)
    op.create_index("idx_audit_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade():
    for table in (
        "audit_logs",
        "expenditures",
        "assignments",
        "transfers",
        "purchases",
        "assets",
        "users",
        "personnel",
        "equipment_types",
        "bases",
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum_type in (ASSIGNMENT_STATUS, TRANSFER_STATUS, PERSONNEL_STATUS, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
