from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from farm_registry import models, schemas
from farm_registry.errors import ErrorCode, FarmRegistryError

# All functions work inside the caller's transaction; nothing here commits.

# ---------- tiny, single-purpose helpers ----------

def _flush_or_conflict(db: Session, name: str) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        raise FarmRegistryError(ErrorCode.FARM_ALREADY_EXISTS, f"Farm name '{name}' is taken") from e

def _write_update_entry(
    db: Session,
    farm_id: int,
    name: str,
    location: str,
    size: int,
    *,
    now: int,
    updater: str,
) -> models.FarmUpdate:
    entry = db.get(models.FarmUpdate, farm_id)
    if entry is None:
        entry = models.FarmUpdate(farm_id=farm_id)
        db.add(entry)
    entry.update_name = name
    entry.update_location = location
    entry.update_size = size
    entry.update_timestamp = now
    entry.updater = updater
    return entry

# ---------- store operations ----------

def insert_farm(
    db: Session,
    farm_id: int,
    payload: schemas.FarmCreate,
    *,
    owner: str,
    timestamp: int,
) -> models.Farm:
    if db.get(models.Farm, farm_id) is not None:
        raise FarmRegistryError(ErrorCode.FARM_ALREADY_EXISTS, f"Farm id {farm_id} is already assigned")

    obj = models.Farm(
        id=farm_id,
        name=payload.name,
        location=payload.location,
        size=payload.size,
        crop_types=payload.crop_types,
        certifications=payload.certifications,
        farm_type=payload.farm_type,
        capacity=payload.capacity,
        climate=payload.climate,
        soil=payload.soil,
        currency=payload.currency,
        sustainability_score=payload.sustainability_score,
        max_investors=payload.max_investors,
        owner=owner,
        timestamp=timestamp,
        status=True,
    )
    db.add(obj)
    _flush_or_conflict(db, payload.name)
    return obj


def get_farm(db: Session, farm_id: int) -> Optional[models.Farm]:
    return db.get(models.Farm, farm_id)


def rename_farm(
    db: Session,
    farm_id: int,
    name: str,
    location: str,
    size: int,
    *,
    now: int,
    updater: str,
) -> models.Farm:
    """
    Replace name/location/size, bump the timestamp and overwrite the
    update entry. The name index moves with the row in the same flush.
    """
    obj = db.get(models.Farm, farm_id)
    if obj is None:
        raise FarmRegistryError(ErrorCode.FARM_NOT_FOUND, f"Farm {farm_id} not found")

    obj.name = name
    obj.location = location
    obj.size = size
    obj.timestamp = now
    _write_update_entry(db, farm_id, name, location, size, now=now, updater=updater)
    _flush_or_conflict(db, name)
    return obj


def farm_id_by_name(db: Session, name: str) -> Optional[int]:
    return db.execute(
        select(models.Farm.id).where(models.Farm.name == name)
    ).scalar_one_or_none()


def exists_by_name(db: Session, name: str) -> bool:
    return farm_id_by_name(db, name) is not None


def farm_count(db: Session) -> int:
    # ids are dense and never reused, so max(id) + 1 is the high-water mark
    top = db.execute(select(func.max(models.Farm.id))).scalar()
    return 0 if top is None else top + 1


def get_farm_update(db: Session, farm_id: int) -> Optional[models.FarmUpdate]:
    return db.get(models.FarmUpdate, farm_id)


CONFIG_ROW_ID = 1


def get_config(db: Session) -> Optional[models.RegistryConfigRow]:
    return db.get(models.RegistryConfigRow, CONFIG_ROW_ID)


def save_config(db: Session, *, authority_contract: Optional[str], registration_fee: int) -> models.RegistryConfigRow:
    row = get_config(db)
    if row is None:
        row = models.RegistryConfigRow(id=CONFIG_ROW_ID)
        db.add(row)
    row.authority_contract = authority_contract
    row.registration_fee = str(registration_fee)
    db.flush()
    return row
