import enum
from datetime import datetime, date
from typing import Optional

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Boolean,
    Enum,
    ForeignKey,
    Numeric,
    UniqueConstraint,
    CheckConstraint,
    JSON,
    Index,
    Date,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .db import Base


class UserRole(str, enum.Enum):
    admin = "admin"
    commander = "commander"
    logistics = "logistics"


class PersonnelStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    transferred = "transferred"


class TransferStatus(str, enum.Enum):
    pending = "pending"
    in_transit = "in_transit"
    completed = "completed"
    cancelled = "cancelled"


class AssignmentStatus(str, enum.Enum):
    active = "active"
    returned = "returned"
    lost = "lost"
    damaged = "damaged"


class MilitaryBase(Base):
    __tablename__ = "bases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    commander_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    users: Mapped[list["User"]] = relationship(back_populates="base")


class EquipmentType(Base):
    __tablename__ = "equipment_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    category: Mapped[str] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit_of_measure: Mapped[str] = mapped_column(String(20), default="unit")


class Personnel(Base):
    __tablename__ = "personnel"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    rank: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    base_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bases.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[PersonnelStatus] = mapped_column(Enum(PersonnelStatus), default=PersonnelStatus.active)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"), Index("idx_users_base", "base_id"))

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[UserRole] = mapped_column(Enum(UserRole))
    # null only for admins, who see every base
    base_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bases.id", ondelete="SET NULL"), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    base: Mapped[Optional[MilitaryBase]] = relationship(back_populates="users")
    audit_entries: Mapped[list["AuditLog"]] = relationship(back_populates="user")


class Asset(Base):
    """Cached stock per base and equipment type; not updated by the transaction writers."""

    __tablename__ = "assets"
    __table_args__ = (
        UniqueConstraint("base_id", "equipment_type_id", name="uq_assets_base_equipment"),
        CheckConstraint("quantity >= 0", name="ck_assets_quantity_non_negative"),
        Index("idx_assets_base", "base_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    equipment_type_id: Mapped[int] = mapped_column(ForeignKey("equipment_types.id", ondelete="CASCADE"))
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        CheckConstraint("cost >= 0", name="ck_purchases_cost_non_negative"),
        Index("idx_purchases_base", "base_id"),
        Index("idx_purchases_date", "purchase_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    equipment_type_id: Mapped[int] = mapped_column(ForeignKey("equipment_types.id", ondelete="CASCADE"))
    quantity: Mapped[int] = mapped_column(Integer)
    cost: Mapped[Optional[float]] = mapped_column(Numeric(12, 2), nullable=True)
    purchase_date: Mapped[date] = mapped_column(Date)
    supplier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Transfer(Base):
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("from_base_id <> to_base_id", name="ck_transfers_distinct_bases"),
        CheckConstraint("quantity > 0", name="ck_transfers_quantity_positive"),
        Index("idx_transfers_from", "from_base_id"),
        Index("idx_transfers_to", "to_base_id"),
        Index("idx_transfers_status", "status"),
        Index("idx_transfers_date", "transfer_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    from_base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    to_base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    equipment_type_id: Mapped[int] = mapped_column(ForeignKey("equipment_types.id", ondelete="CASCADE"))
    quantity: Mapped[int] = mapped_column(Integer)
    transfer_date: Mapped[date] = mapped_column(Date)
    status: Mapped[TransferStatus] = mapped_column(Enum(TransferStatus), default=TransferStatus.pending)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        Index("idx_assignments_base", "base_id"),
        Index("idx_assignments_personnel", "personnel_id"),
        Index("idx_assignments_status", "status"),
        Index("idx_assignments_date", "assignment_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    equipment_type_id: Mapped[int] = mapped_column(ForeignKey("equipment_types.id", ondelete="CASCADE"))
    personnel_id: Mapped[int] = mapped_column(ForeignKey("personnel.id", ondelete="CASCADE"))
    serial_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    assignment_date: Mapped[date] = mapped_column(Date)
    return_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(Enum(AssignmentStatus), default=AssignmentStatus.active)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Expenditure(Base):
    __tablename__ = "expenditures"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_expenditures_quantity_positive"),
        Index("idx_expenditures_base", "base_id"),
        Index("idx_expenditures_date", "expenditure_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    base_id: Mapped[int] = mapped_column(ForeignKey("bases.id", ondelete="CASCADE"))
    equipment_type_id: Mapped[int] = mapped_column(ForeignKey("equipment_types.id", ondelete="CASCADE"))
    quantity: Mapped[int] = mapped_column(Integer)
    expenditure_date: Mapped[date] = mapped_column(Date)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (Index("idx_audit_entity", "entity_type", "entity_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(50))
    entity_type: Mapped[str] = mapped_column(String(50))
    entity_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    user: Mapped[Optional[User]] = relationship(back_populates="audit_entries")
