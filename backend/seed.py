import asyncio
from datetime import date
from sqlalchemy import select
from armory.config import get_settings
from armory.db import Database
from armory.models import (
    MilitaryBase,
    EquipmentType,
    Personnel,
    User,
    UserRole,
    Asset,
    Purchase,
    Transfer,
    TransferStatus,
    Assignment,
    Expenditure,
    AuditLog,
)
from armory.security import hash_password


DEMO_PASSWORD = "demo123"


async def run():
    database = Database(get_settings().database_url)
    try:
        async with database.session() as session:
            bases = await seed_bases(session)
            users = await seed_users(session, bases)
            types = await seed_equipment_types(session)
            people = await seed_personnel(session, bases)
            await session.flush()
            await seed_assets(session, bases, types)
            await seed_transactions(session, bases, types, people, users)
            await session.commit()
    finally:
        await database.dispose()


async def _get_or_add(session, model, lookup: dict, **values):
    res = await session.execute(select(model).filter_by(**lookup))
    row = res.scalar_one_or_none()
    if row:
        return row
    row = model(**lookup, **values)
    session.add(row)
    await session.flush()
    return row


async def seed_bases(session):
    sample = [
        ("Base Alpha", "Northern Command, Sector 1", "Col. James Mitchell"),
        ("Base Beta", "Eastern Command, Sector 2", "Col. Sarah Johnson"),
        ("Base Charlie", "Western Command, Sector 3", "Col. Robert Chen"),
        ("Central Depot", "Central Command HQ", "Gen. Michael Adams"),
    ]
    bases = {}
    for name, location, commander in sample:
        bases[name] = await _get_or_add(
            session, MilitaryBase, {"name": name}, location=location, commander_name=commander
        )
    return bases


async def seed_users(session, bases):
    sample = [
        ("admin@military.gov", "Admin User", UserRole.admin, None),
        ("commander.alpha@military.gov", "James Mitchell", UserRole.commander, "Base Alpha"),
        ("commander.beta@military.gov", "Sarah Johnson", UserRole.commander, "Base Beta"),
        ("logistics@military.gov", "David Williams", UserRole.logistics, "Central Depot"),
    ]
    users = {}
    for email, name, role, base_name in sample:
        users[email] = await _get_or_add(
            session,
            User,
            {"email": email},
            name=name,
            role=role,
            base_id=bases[base_name].id if base_name else None,
            password_hash=hash_password(DEMO_PASSWORD),
            is_active=True,
        )
    return users


async def seed_equipment_types(session):
    sample = [
        ("M4 Rifle", "Weapons", "Standard issue assault rifle", "unit"),
        ("M9 Pistol", "Weapons", "Standard issue sidearm", "unit"),
        ("Body Armor", "Protective Gear", "Ballistic protection vest", "unit"),
        ("Combat Helmet", "Protective Gear", "Standard combat helmet", "unit"),
        ("Humvee", "Vehicles", "High Mobility Multipurpose Wheeled Vehicle", "unit"),
        ("M1A2 Abrams", "Vehicles", "Main battle tank", "unit"),
        ("Tactical Radio", "Communications", "Secure tactical communication system", "unit"),
        ("Night Vision Goggles", "Equipment", "Night vision device", "unit"),
        ("5.56mm Ammunition", "Ammunition", "Standard rifle ammunition", "rounds"),
        ("9mm Ammunition", "Ammunition", "Pistol ammunition", "rounds"),
    ]
    types = {}
    for name, category, description, unit in sample:
        types[name] = await _get_or_add(
            session, EquipmentType, {"name": name}, category=category, description=description, unit_of_measure=unit
        )
    return types


async def seed_personnel(session, bases):
    sample = [
        ("John Smith", "Sergeant", "Alpha Company", "Base Alpha"),
        ("Emily Davis", "Corporal", "Bravo Company", "Base Alpha"),
        ("Michael Brown", "Lieutenant", "Charlie Company", "Base Beta"),
        ("Jessica Wilson", "Sergeant", "Delta Company", "Base Beta"),
        ("Robert Taylor", "Captain", "Echo Company", "Base Charlie"),
        ("Amanda Martinez", "Corporal", "Alpha Company", "Base Alpha"),
        ("David Anderson", "Lieutenant", "Bravo Company", "Base Beta"),
    ]
    people = {}
    for name, rank, unit, base_name in sample:
        people[name] = await _get_or_add(
            session, Personnel, {"name": name}, rank=rank, unit=unit, base_id=bases[base_name].id
        )
    return people


async def seed_assets(session, bases, types):
    stock = {
        "Base Alpha": [("M4 Rifle", 250), ("M9 Pistol", 100), ("Body Armor", 300), ("Combat Helmet", 300), ("Humvee", 15), ("Tactical Radio", 50)],
        "Base Beta": [("M4 Rifle", 200), ("M9 Pistol", 80), ("Body Armor", 250), ("Humvee", 12), ("M1A2 Abrams", 3)],
        "Base Charlie": [("M4 Rifle", 180), ("Body Armor", 200), ("Humvee", 10)],
        "Central Depot": [("M4 Rifle", 500), ("M9 Pistol", 200), ("Body Armor", 400), ("5.56mm Ammunition", 100000), ("9mm Ammunition", 50000)],
    }
    for base_name, items in stock.items():
        for type_name, qty in items:
            await _get_or_add(
                session,
                Asset,
                {"base_id": bases[base_name].id, "equipment_type_id": types[type_name].id},
                quantity=qty,
            )


async def seed_transactions(session, bases, types, people, users):
    # demo history goes in only once, on an empty ledger
    res = await session.execute(select(Purchase.id).limit(1))
    if res.scalar_one_or_none() is not None:
        return
    admin = users["admin@military.gov"]
    alpha_cmd = users["commander.alpha@military.gov"]
    beta_cmd = users["commander.beta@military.gov"]
    logistics = users["logistics@military.gov"]
    alpha, beta, charlie, depot = (bases[n] for n in ("Base Alpha", "Base Beta", "Base Charlie", "Central Depot"))

    session.add_all(
        [
            Purchase(base_id=alpha.id, equipment_type_id=types["M4 Rifle"].id, quantity=50, cost=75000, purchase_date=date(2024, 1, 15), supplier="Defense Contractors Inc.", notes="Quarterly procurement", created_by=admin.id),
            Purchase(base_id=beta.id, equipment_type_id=types["Humvee"].id, quantity=5, cost=350000, purchase_date=date(2024, 1, 20), supplier="Military Vehicles Corp.", notes="Vehicle upgrade program", created_by=admin.id),
            Purchase(base_id=alpha.id, equipment_type_id=types["Body Armor"].id, quantity=100, cost=120000, purchase_date=date(2024, 2, 10), supplier="Armor Systems Ltd.", notes="Protective gear replenishment", created_by=alpha_cmd.id),
            Purchase(base_id=charlie.id, equipment_type_id=types["M4 Rifle"].id, quantity=75, cost=112500, purchase_date=date(2024, 2, 15), supplier="Defense Contractors Inc.", notes="Standard procurement", created_by=admin.id),
            Purchase(base_id=depot.id, equipment_type_id=types["5.56mm Ammunition"].id, quantity=50000, cost=25000, purchase_date=date(2024, 3, 1), supplier="Ammunition Depot", notes="Ammunition stock replenishment", created_by=logistics.id),
            Transfer(from_base_id=alpha.id, to_base_id=beta.id, equipment_type_id=types["M4 Rifle"].id, quantity=30, transfer_date=date(2024, 1, 25), status=TransferStatus.completed, notes="Support for training exercise", created_by=admin.id),
            Transfer(from_base_id=depot.id, to_base_id=alpha.id, equipment_type_id=types["M4 Rifle"].id, quantity=100, transfer_date=date(2024, 2, 5), status=TransferStatus.completed, notes="Monthly distribution from central depot", created_by=admin.id),
            Transfer(from_base_id=beta.id, to_base_id=charlie.id, equipment_type_id=types["Humvee"].id, quantity=3, transfer_date=date(2024, 2, 20), status=TransferStatus.in_transit, notes="Vehicle reallocation", created_by=alpha_cmd.id),
            Transfer(from_base_id=depot.id, to_base_id=beta.id, equipment_type_id=types["5.56mm Ammunition"].id, quantity=10000, transfer_date=date(2024, 3, 10), status=TransferStatus.completed, notes="Ammunition distribution", created_by=logistics.id),
            Assignment(base_id=alpha.id, equipment_type_id=types["M4 Rifle"].id, personnel_id=people["John Smith"].id, serial_number="M4-2024-001", assignment_date=date(2024, 1, 20), notes="Standard issue", created_by=alpha_cmd.id),
            Assignment(base_id=alpha.id, equipment_type_id=types["M9 Pistol"].id, personnel_id=people["Emily Davis"].id, serial_number="M9-2024-015", assignment_date=date(2024, 1, 22), notes="Sidearm assignment", created_by=alpha_cmd.id),
            Assignment(base_id=beta.id, equipment_type_id=types["M4 Rifle"].id, personnel_id=people["Michael Brown"].id, serial_number="M4-2024-087", assignment_date=date(2024, 2, 1), notes="Officer weapon", created_by=beta_cmd.id),
            Assignment(base_id=beta.id, equipment_type_id=types["Humvee"].id, personnel_id=people["Jessica Wilson"].id, serial_number="HV-2024-005", assignment_date=date(2024, 2, 5), notes="Squad vehicle", created_by=beta_cmd.id),
            Assignment(base_id=alpha.id, equipment_type_id=types["Body Armor"].id, personnel_id=people["Amanda Martinez"].id, serial_number="BA-2024-120", assignment_date=date(2024, 2, 10), notes="Body armor", created_by=alpha_cmd.id),
            Assignment(base_id=beta.id, equipment_type_id=types["Tactical Radio"].id, personnel_id=people["David Anderson"].id, serial_number="TR-2024-045", assignment_date=date(2024, 2, 15), notes="Communication equipment", created_by=beta_cmd.id),
            Expenditure(base_id=alpha.id, equipment_type_id=types["5.56mm Ammunition"].id, quantity=5000, expenditure_date=date(2024, 1, 30), reason="Training exercise", notes="Range qualification training", created_by=alpha_cmd.id),
            Expenditure(base_id=beta.id, equipment_type_id=types["5.56mm Ammunition"].id, quantity=3000, expenditure_date=date(2024, 2, 15), reason="Qualification range", notes="Annual weapons qualification", created_by=beta_cmd.id),
            Expenditure(base_id=alpha.id, equipment_type_id=types["9mm Ammunition"].id, quantity=1000, expenditure_date=date(2024, 2, 20), reason="Tactical training", notes="Close quarters combat training", created_by=alpha_cmd.id),
            Expenditure(base_id=charlie.id, equipment_type_id=types["5.56mm Ammunition"].id, quantity=2500, expenditure_date=date(2024, 3, 5), reason="Live fire exercise", notes="Battalion training event", created_by=admin.id),
            AuditLog(user_id=admin.id, action="SYSTEM_INIT", entity_type="SYSTEM", entity_id=0, details={"message": "Database initialized with sample data", "version": "1.0"}),
        ]
    )


if __name__ == "__main__":
    asyncio.run(run())
