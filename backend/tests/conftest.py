"""
Pytest fixtures for the ledger tests.

Provides an in-memory store, a small world of bases, equipment, personnel
and users, and an HTTP client bound to the application.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_LOGIN_PER_MIN", "1000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.pool import StaticPool

from armory.db import Database
from armory.main import create_app
from armory.models import (
    MilitaryBase,
    EquipmentType,
    Personnel,
    User,
    UserRole,
    Asset,
)
from armory.security import hash_password, create_access_token
from armory.services.audit import AuditRecorder
from armory.services.transactions import TransactionWriter


PASSWORD = "demo123"


@pytest.fixture
async def database():
    """Fresh in-memory store per test."""
    db = Database("sqlite+aiosqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
async def world(database):
    """Three bases, two equipment types, personnel and one user per role."""
    async with database.session() as s:
        alpha = MilitaryBase(name="Base Alpha", location="Sector 1")
        beta = MilitaryBase(name="Base Beta", location="Sector 2")
        depot = MilitaryBase(name="Central Depot", location="HQ")
        s.add_all([alpha, beta, depot])
        rifle = EquipmentType(name="M4 Rifle", category="Weapons")
        radio = EquipmentType(name="Tactical Radio", category="Communications")
        s.add_all([rifle, radio])
        await s.flush()

        soldier = Personnel(name="John Smith", rank="Sergeant", unit="Alpha Company", base_id=alpha.id)
        other = Personnel(name="Michael Brown", rank="Lieutenant", unit="Charlie Company", base_id=beta.id)
        hashed = hash_password(PASSWORD)
        admin = User(email="admin@test.mil", name="Admin", role=UserRole.admin, password_hash=hashed)
        commander = User(
            email="commander@test.mil",
            name="Alpha Commander",
            role=UserRole.commander,
            base_id=alpha.id,
            password_hash=hashed,
        )
        logistics = User(
            email="logistics@test.mil",
            name="Logistics Officer",
            role=UserRole.logistics,
            base_id=depot.id,
            password_hash=hashed,
        )
        s.add_all([soldier, other, admin, commander, logistics])
        await s.commit()

        return SimpleNamespace(
            alpha=alpha,
            beta=beta,
            depot=depot,
            rifle=rifle,
            radio=radio,
            soldier=soldier,
            other=other,
            admin=admin,
            commander=commander,
            logistics=logistics,
        )


@pytest.fixture
async def stocked(database, world):
    """Asset snapshot: 665 units at Alpha, 200 at Beta."""
    async with database.session() as s:
        s.add_all(
            [
                Asset(base_id=world.alpha.id, equipment_type_id=world.rifle.id, quantity=250),
                Asset(base_id=world.alpha.id, equipment_type_id=world.radio.id, quantity=415),
                Asset(base_id=world.beta.id, equipment_type_id=world.rifle.id, quantity=200),
            ]
        )
        await s.commit()
    return world


@pytest.fixture
def writer_factory(database):
    """Build a TransactionWriter bound to a fresh session."""

    def _make(session):
        return TransactionWriter(session, AuditRecorder(database.sessionmaker))

    return _make


@pytest.fixture
async def client(database):
    app = create_app(database=database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _auth(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(world):
    return _auth(world.admin)


@pytest.fixture
def commander_headers(world):
    return _auth(world.commander)


@pytest.fixture
def logistics_headers(world):
    return _auth(world.logistics)

