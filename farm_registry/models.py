from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from .db import Base

NAME_MAX_LENGTH = 100
# largest value an Integer column holds (signed 64-bit)
MAX_STORED_INT = 2**63 - 1


class Farm(Base):
    __tablename__ = "farms"

    # assigned by the registry, never autoincremented
    id = Column(Integer, primary_key=True, autoincrement=False)
    # unique index doubles as the name -> id lookup
    name = Column(String(NAME_MAX_LENGTH), nullable=False, unique=True, index=True)
    location = Column(String(NAME_MAX_LENGTH), nullable=False)
    size = Column(Integer, nullable=False)
    crop_types = Column(String, nullable=False)
    certifications = Column(String, nullable=False, default="")
    farm_type = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)
    climate = Column(String, nullable=False)
    soil = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    sustainability_score = Column(Integer, nullable=False)
    max_investors = Column(Integer, nullable=False)

    owner = Column(String, nullable=False)
    timestamp = Column(Integer, nullable=False)
    status = Column(Boolean, nullable=False, default=True)


class FarmUpdate(Base):
    """Latest update per farm; overwritten on every rename."""

    __tablename__ = "farm_updates"

    farm_id = Column(Integer, ForeignKey("farms.id"), primary_key=True)
    update_name = Column(String(NAME_MAX_LENGTH), nullable=False)
    update_location = Column(String(NAME_MAX_LENGTH), nullable=False)
    update_size = Column(Integer, nullable=False)
    update_timestamp = Column(Integer, nullable=False)
    updater = Column(String, nullable=False)


class RegistryConfigRow(Base):
    """Single-row table holding the registry's authority binding and fee."""

    __tablename__ = "registry_config"

    id = Column(Integer, primary_key=True, autoincrement=False)
    authority_contract = Column(String, nullable=True)
    # decimal text: the fee has no upper bound and may exceed an Integer column
    registration_fee = Column(String, nullable=False)
