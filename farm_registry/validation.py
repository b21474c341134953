# farm_registry/validation.py
"""
Field rules for farm registration.

Checks run in a fixed order and the first failing rule decides the error
code, so callers see the same code whenever several fields are bad at once.
"""
from __future__ import annotations
from typing import Callable, Optional

from .errors import ErrorCode, FarmRegistryError
from .models import MAX_STORED_INT, NAME_MAX_LENGTH
from .schemas import Currency, FarmCreate, FarmType

FARM_TYPES = frozenset(t.value for t in FarmType)
CURRENCIES = frozenset(c.value for c in Currency)
MAX_SUSTAINABILITY_SCORE = 100


# ---------- tiny, single-purpose checks ----------

def _bounded_text(value: str) -> bool:
    return bool(value) and len(value) <= NAME_MAX_LENGTH

def _non_empty(value: str) -> bool:
    return bool(value)

def _positive(value: int) -> bool:
    return 0 < value <= MAX_STORED_INT

def _certifications_ok(value: str) -> bool:
    # any string, empty included
    return value is not None

def _score_ok(value: int) -> bool:
    return 0 <= value <= MAX_SUSTAINABILITY_SCORE


_RULES: list[tuple[Callable[[FarmCreate], bool], ErrorCode]] = [
    (lambda f: _bounded_text(f.name), ErrorCode.INVALID_NAME),
    (lambda f: _bounded_text(f.location), ErrorCode.INVALID_LOCATION),
    (lambda f: _positive(f.size), ErrorCode.INVALID_SIZE),
    (lambda f: _non_empty(f.crop_types), ErrorCode.INVALID_CROP_TYPES),
    (lambda f: _certifications_ok(f.certifications), ErrorCode.INVALID_CERTIFICATIONS),
    (lambda f: f.farm_type in FARM_TYPES, ErrorCode.INVALID_FARM_TYPE),
    (lambda f: _positive(f.capacity), ErrorCode.INVALID_CAPACITY),
    (lambda f: _non_empty(f.climate), ErrorCode.INVALID_CLIMATE),
    (lambda f: _non_empty(f.soil), ErrorCode.INVALID_SOIL),
    (lambda f: f.currency in CURRENCIES, ErrorCode.INVALID_CURRENCY),
    (lambda f: _score_ok(f.sustainability_score), ErrorCode.INVALID_SUSTAINABILITY),
    # max_investors has always been reported as NOT_AUTHORIZED; clients match on it
    (lambda f: _positive(f.max_investors), ErrorCode.NOT_AUTHORIZED),
]


def first_violation(candidate: FarmCreate) -> Optional[ErrorCode]:
    """Return the code of the first rule the candidate breaks, or None."""
    for check, code in _RULES:
        if not check(candidate):
            return code
    return None


def validate_farm(candidate: FarmCreate) -> None:
    code = first_violation(candidate)
    if code is not None:
        raise FarmRegistryError(code)


def check_update_fields(name: str, location: str, size: int) -> bool:
    """Rules applied to the mutable fields on update."""
    return _bounded_text(name) and _bounded_text(location) and _positive(size)
