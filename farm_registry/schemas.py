# farm_registry/schemas.py
from enum import Enum

from pydantic import BaseModel


class FarmType(str, Enum):
    ORGANIC = "organic"
    CONVENTIONAL = "conventional"
    HYDROPONIC = "hydroponic"


class Currency(str, Enum):
    STX = "STX"
    USD = "USD"
    BTC = "BTC"


class FarmCreate(BaseModel):
    # plain types: the registry checks values itself so each rule maps to its own error code
    name: str
    location: str
    size: int
    crop_types: str
    certifications: str = ""
    farm_type: str
    capacity: int
    climate: str
    soil: str
    currency: str
    sustainability_score: int
    max_investors: int


class FarmOut(FarmCreate):
    id: int
    owner: str
    timestamp: int
    status: bool

    class Config:
        from_attributes = True


class FarmUpdateOut(BaseModel):
    farm_id: int
    update_name: str
    update_location: str
    update_size: int
    update_timestamp: int
    updater: str

    class Config:
        from_attributes = True
