from datetime import datetime, date
from typing import Optional, Generic, TypeVar
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from .models import UserRole, PersonnelStatus, TransferStatus, AssignmentStatus


T = TypeVar("T")


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    count: int


class DataEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class CreatedEnvelope(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserBase(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    base_id: Optional[int]

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserBase


class BaseOut(BaseModel):
    id: int
    name: str
    location: Optional[str]
    commander_name: Optional[str]

    class Config:
        from_attributes = True


class EquipmentTypeOut(BaseModel):
    id: int
    name: str
    category: str
    description: Optional[str]
    unit_of_measure: str

    class Config:
        from_attributes = True


class PersonnelOut(BaseModel):
    id: int
    name: str
    rank: Optional[str]
    unit: Optional[str]
    base_id: Optional[int]
    status: PersonnelStatus
    base_name: Optional[str] = None

    class Config:
        from_attributes = True


class AssetOut(BaseModel):
    id: int
    base_id: int
    equipment_type_id: int
    quantity: int
    last_updated: datetime
    base_name: Optional[str] = None
    equipment_name: Optional[str] = None
    equipment_category: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseCreate(BaseModel):
    base_id: Optional[int] = None
    equipment_type_id: Optional[int] = None
    quantity: Optional[int] = None
    cost: Optional[float] = Field(None, allow_inf_nan=False)
    purchase_date: Optional[date] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None


class PurchaseOut(BaseModel):
    id: int
    base_id: int
    equipment_type_id: int
    quantity: int
    cost: Optional[float]
    purchase_date: date
    supplier: Optional[str]
    notes: Optional[str]
    created_by: Optional[int]
    created_at: datetime
    base_name: Optional[str] = None
    equipment_name: Optional[str] = None
    equipment_category: Optional[str] = None
    created_by_name: Optional[str] = None

    class Config:
        from_attributes = True


class TransferCreate(BaseModel):
    from_base_id: Optional[int] = None
    to_base_id: Optional[int] = None
    equipment_type_id: Optional[int] = None
    quantity: Optional[int] = None
    transfer_date: Optional[date] = None
    notes: Optional[str] = None


class TransferOut(BaseModel):
    id: int
    from_base_id: int
    to_base_id: int
    equipment_type_id: int
    quantity: int
    transfer_date: date
    status: TransferStatus
    notes: Optional[str]
    created_by: Optional[int]
    approved_by: Optional[int]
    completed_at: Optional[datetime]
    created_at: datetime
    from_base_name: Optional[str] = None
    to_base_name: Optional[str] = None
    equipment_name: Optional[str] = None
    equipment_category: Optional[str] = None
    created_by_name: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentCreate(BaseModel):
    base_id: Optional[int] = None
    equipment_type_id: Optional[int] = None
    personnel_id: Optional[int] = None
    serial_number: Optional[str] = None
    assignment_date: Optional[date] = None
    notes: Optional[str] = None


class AssignmentOut(BaseModel):
    id: int
    base_id: int
    equipment_type_id: int
    personnel_id: int
    serial_number: Optional[str]
    assignment_date: date
    return_date: Optional[date]
    status: AssignmentStatus
    notes: Optional[str]
    created_by: Optional[int]
    created_at: datetime
    base_name: Optional[str] = None
    equipment_name: Optional[str] = None
    equipment_category: Optional[str] = None
    personnel_name: Optional[str] = None
    personnel_rank: Optional[str] = None
    personnel_unit: Optional[str] = None
    created_by_name: Optional[str] = None

    class Config:
        from_attributes = True


class ExpenditureCreate(BaseModel):
    base_id: Optional[int] = None
    equipment_type_id: Optional[int] = None
    quantity: Optional[int] = None
    expenditure_date: Optional[date] = None
    reason: Optional[str] = None
    notes: Optional[str] = None


class ExpenditureOut(BaseModel):
    id: int
    base_id: int
    equipment_type_id: int
    quantity: int
    expenditure_date: date
    reason: Optional[str]
    notes: Optional[str]
    created_by: Optional[int]
    created_at: datetime
    base_name: Optional[str] = None
    equipment_name: Optional[str] = None
    equipment_category: Optional[str] = None
    created_by_name: Optional[str] = None

    class Config:
        from_attributes = True


class DashboardMetrics(BaseModel):
    opening_balance: int
    closing_balance: int
    net_movement: int
    purchases: int
    transfer_in: int
    transfer_out: int
    assigned: int
    expended: int

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class AuditEntry(BaseModel):
    id: int
    user_id: Optional[int]
    action: str
    entity_type: str
    entity_id: Optional[int]
    details: Optional[dict]
    timestamp: datetime
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_role: Optional[UserRole] = None

    class Config:
        from_attributes = True
