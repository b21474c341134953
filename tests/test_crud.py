from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from farm_registry import crud, models, schemas
from farm_registry.db import Base
from farm_registry.errors import ErrorCode, FarmRegistryError


def mk_payload(
    *,
    name: str = "Alpha Farm",
    location: str = "VillageX",
    size: int = 100,
    farm_type: str = "organic",
    currency: str = "STX",
) -> schemas.FarmCreate:
    return schemas.FarmCreate(
        name=name,
        location=location,
        size=size,
        crop_types="Wheat, Corn",
        certifications="Organic Certified",
        farm_type=farm_type,
        capacity=500,
        climate="Temperate",
        soil="Loam",
        currency=currency,
        sustainability_score=80,
        max_investors=50,
    )


@pytest.fixture(scope="function")
def session_factory():
    """Fresh in-memory SQLite per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def test_insert_farm_registers_row_and_name(db_session):
    obj = crud.insert_farm(db_session, 0, mk_payload(), owner="ST1TEST", timestamp=7)

    assert isinstance(obj, models.Farm)
    assert obj.id == 0
    assert obj.owner == "ST1TEST"
    assert obj.timestamp == 7
    assert obj.status is True
    assert crud.exists_by_name(db_session, "Alpha Farm") is True
    assert crud.farm_id_by_name(db_session, "Alpha Farm") == 0
    assert crud.get_farm_update(db_session, 0) is None


def test_insert_never_overwrites_existing_id(db_session):
    crud.insert_farm(db_session, 0, mk_payload(), owner="ST1TEST", timestamp=0)

    with pytest.raises(FarmRegistryError) as exc:
        crud.insert_farm(db_session, 0, mk_payload(name="Other"), owner="ST1TEST", timestamp=0)

    assert exc.value.code == ErrorCode.FARM_ALREADY_EXISTS
    assert crud.get_farm(db_session, 0).name == "Alpha Farm"


def test_insert_duplicate_name_trips_unique_index(session_factory):
    with session_factory.begin() as db:
        crud.insert_farm(db, 0, mk_payload(), owner="ST1TEST", timestamp=0)

    with pytest.raises(FarmRegistryError) as exc:
        with session_factory.begin() as db:
            crud.insert_farm(db, 1, mk_payload(location="CityY"), owner="ST1TEST", timestamp=0)
    assert exc.value.code == ErrorCode.FARM_ALREADY_EXISTS

    with session_factory() as db:
        assert crud.get_farm(db, 1) is None
        assert crud.farm_count(db) == 1


def test_get_missing_farm_returns_none(db_session):
    assert crud.get_farm(db_session, 99) is None
    assert crud.exists_by_name(db_session, "Nope") is False
    assert crud.farm_id_by_name(db_session, "Nope") is None


def test_farm_count_is_high_water_mark(db_session):
    assert crud.farm_count(db_session) == 0
    crud.insert_farm(db_session, 0, mk_payload(name="Farm1"), owner="ST1TEST", timestamp=0)
    crud.insert_farm(db_session, 1, mk_payload(name="Farm2"), owner="ST1TEST", timestamp=0)
    assert crud.farm_count(db_session) == 2


def test_rename_moves_name_index_and_writes_update_entry(db_session):
    crud.insert_farm(db_session, 0, mk_payload(name="Old Farm", location="Old Location"), owner="ST1TEST", timestamp=0)

    obj = crud.rename_farm(db_session, 0, "New Farm", "New Location", 200, now=5, updater="ST1TEST")

    assert (obj.name, obj.location, obj.size, obj.timestamp) == ("New Farm", "New Location", 200, 5)
    assert obj.crop_types == "Wheat, Corn"
    assert crud.exists_by_name(db_session, "Old Farm") is False
    assert crud.farm_id_by_name(db_session, "New Farm") == 0

    entry = crud.get_farm_update(db_session, 0)
    assert entry.update_name == "New Farm"
    assert entry.update_location == "New Location"
    assert entry.update_size == 200
    assert entry.update_timestamp == 5
    assert entry.updater == "ST1TEST"


def test_rename_overwrites_previous_update_entry(db_session):
    crud.insert_farm(db_session, 0, mk_payload(), owner="ST1TEST", timestamp=0)
    crud.rename_farm(db_session, 0, "Second", "Loc2", 2, now=1, updater="ST1TEST")
    crud.rename_farm(db_session, 0, "Third", "Loc3", 3, now=2, updater="ST1TEST")

    entry = crud.get_farm_update(db_session, 0)
    assert entry.update_name == "Third"
    assert entry.update_timestamp == 2
    assert db_session.query(models.FarmUpdate).count() == 1


def test_rename_to_same_name_is_allowed(db_session):
    crud.insert_farm(db_session, 0, mk_payload(), owner="ST1TEST", timestamp=0)
    obj = crud.rename_farm(db_session, 0, "Alpha Farm", "Elsewhere", 300, now=1, updater="ST1TEST")
    assert obj.location == "Elsewhere"
    assert crud.farm_id_by_name(db_session, "Alpha Farm") == 0


def test_rename_missing_farm_raises_not_found(db_session):
    with pytest.raises(FarmRegistryError) as exc:
        crud.rename_farm(db_session, 3, "New", "Loc", 1, now=0, updater="ST1TEST")
    assert exc.value.code == ErrorCode.FARM_NOT_FOUND
    assert crud.get_farm_update(db_session, 3) is None


def test_rename_onto_taken_name_rolls_back_both_rows(session_factory):
    with session_factory.begin() as db:
        crud.insert_farm(db, 0, mk_payload(name="Farm1"), owner="ST1TEST", timestamp=0)
        crud.insert_farm(db, 1, mk_payload(name="Farm2"), owner="ST1TEST", timestamp=0)

    with pytest.raises(FarmRegistryError):
        with session_factory.begin() as db:
            crud.rename_farm(db, 1, "Farm1", "Moved", 9, now=3, updater="ST1TEST")

    with session_factory() as db:
        assert crud.get_farm(db, 1).name == "Farm2"
        assert crud.get_farm(db, 1).location == "VillageX"
        assert crud.farm_id_by_name(db, "Farm1") == 0
        assert crud.get_farm_update(db, 1) is None
