# farm_registry/registry_service.py
from __future__ import annotations
import dataclasses
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from farm_registry import crud, schemas
from farm_registry.db import make_session_factory
from farm_registry.errors import ErrorCode, FarmRegistryError, InvalidAuthorityContract
from farm_registry.ports import AuthorityOracle, FeeSink
from farm_registry.settings import RegistrySettings
from farm_registry.validation import check_update_fields, validate_farm

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

# well-known all-zero address; fees sent there are burned
BURN_ADDRESS = "SP000000000000000000002Q6VF78"


@dataclasses.dataclass
class RegistryConfig:
    next_farm_id: int = 0
    max_farms: int = 1000
    registration_fee: int = 1000
    authority_contract: Optional[str] = None


class FarmRegistryService:
    """
    Sole writer for the farm tables and the registry configuration.

    Every public call runs in one transaction: a call that raises (or, for
    update_farm, returns False) leaves the store and the configuration as
    they were.
    """

    def __init__(
        self,
        oracle: AuthorityOracle,
        fee_sink: FeeSink,
        *,
        session_factory: sessionmaker | None = None,
        settings: RegistrySettings | None = None,
        clock: Clock | None = None,
    ):
        # DI
        settings = settings or RegistrySettings()
        self._oracle = oracle
        self._fee_sink = fee_sink
        self._session_factory = session_factory or make_session_factory(settings.database_url)
        # default clock is a block height that advances once per committed mutation
        self._height = 0
        self._clock = clock or self._block_height

        with self._session_factory() as db:
            next_id = crud.farm_count(db)
            row = crud.get_config(db)
        self._config = RegistryConfig(
            next_farm_id=next_id,
            max_farms=settings.max_farms,
            registration_fee=int(row.registration_fee) if row else settings.registration_fee,
            authority_contract=row.authority_contract if row else None,
        )

    @property
    def config(self) -> RegistryConfig:
        return dataclasses.replace(self._config)

    def _block_height(self) -> int:
        return self._height

    def _committed(self) -> None:
        self._height += 1

    # ---------- configuration ----------

    def set_authority_contract(self, principal: str) -> None:
        if not principal or principal == BURN_ADDRESS:
            raise InvalidAuthorityContract(f"'{principal}' cannot receive registration fees")
        with self._session_factory.begin() as db:
            row = crud.get_config(db)
            bound = row.authority_contract if row else self._config.authority_contract
            if bound is not None:
                raise InvalidAuthorityContract(f"authority contract already bound to '{bound}'")
            crud.save_config(db, authority_contract=principal, registration_fee=self._config.registration_fee)
        self._config.authority_contract = principal
        logger.info("Authority contract bound to %s", principal)

    def set_registration_fee(self, new_fee: int) -> None:
        if self._config.authority_contract is None:
            raise FarmRegistryError(ErrorCode.NOT_AUTHORIZED, "no authority contract bound")
        with self._session_factory.begin() as db:
            crud.save_config(db, authority_contract=self._config.authority_contract, registration_fee=new_fee)
        self._config.registration_fee = new_fee
        logger.info("Registration fee set to %d", new_fee)

    # ---------- mutations ----------

    def create_farm(self, caller: str, farm: schemas.FarmCreate) -> int:
        """
        Register a farm owned by caller and return its id.

        Check order is fixed: capacity, field rules, caller authority,
        name uniqueness, authority contract binding, then the fee.
        """
        cfg = self._config
        if cfg.next_farm_id >= cfg.max_farms:
            raise FarmRegistryError(ErrorCode.MAX_FARMS_EXCEEDED, f"registry is full ({cfg.max_farms} farms)")

        validate_farm(farm)

        if not self._oracle.is_verified_authority(caller):
            logger.warning("Rejected farm '%s': %s is not a verified authority", farm.name, caller)
            raise FarmRegistryError(ErrorCode.NOT_AUTHORIZED, f"{caller} is not a verified authority")

        farm_id = cfg.next_farm_id
        with self._session_factory.begin() as db:
            if crud.exists_by_name(db, farm.name):
                raise FarmRegistryError(ErrorCode.FARM_ALREADY_EXISTS, f"Farm name '{farm.name}' is taken")
            if cfg.authority_contract is None:
                raise FarmRegistryError(ErrorCode.AUTHORITY_NOT_VERIFIED, "no authority contract bound")

            # insert flushes, so a row the store rejects is never charged
            crud.insert_farm(db, farm_id, farm, owner=caller, timestamp=self._clock())
            self._fee_sink.transfer(cfg.registration_fee, caller, cfg.authority_contract)

        cfg.next_farm_id = farm_id + 1
        self._committed()
        logger.info("Registered farm %d '%s' for %s (fee %d)", farm_id, farm.name, caller, cfg.registration_fee)
        return farm_id

    def update_farm(self, caller: str, farm_id: int, name: str, location: str, size: int) -> bool:
        """Owner-only rename. Any failure is reported as False."""
        try:
            with self._session_factory.begin() as db:
                applied = self._apply_update(db, caller, farm_id, name, location, size)
        except FarmRegistryError as e:
            # raised from the flush, so the transaction has already been rolled back
            logger.warning("Update of farm %s rolled back: %s", farm_id, e)
            return False

        if applied:
            self._committed()
            logger.info("Farm %d updated by %s", farm_id, caller)
        return applied

    def _apply_update(self, db: Session, caller: str, farm_id: int, name: str, location: str, size: int) -> bool:
        obj = crud.get_farm(db, farm_id)
        if obj is None:
            logger.debug("Update rejected: farm %s not found", farm_id)
            return False
        if obj.owner != caller:
            logger.warning("Update rejected: %s does not own farm %d", caller, farm_id)
            return False
        if not check_update_fields(name, location, size):
            logger.debug("Update rejected: invalid fields for farm %d", farm_id)
            return False
        holder = crud.farm_id_by_name(db, name)
        if holder is not None and holder != farm_id:
            logger.debug("Update rejected: name '%s' belongs to farm %d", name, holder)
            return False

        crud.rename_farm(db, farm_id, name, location, size, now=self._clock(), updater=caller)
        return True

    # ---------- reads ----------

    def get_farm(self, farm_id: int) -> Optional[schemas.FarmOut]:
        with self._session_factory() as db:
            obj = crud.get_farm(db, farm_id)
            return schemas.FarmOut.model_validate(obj) if obj else None

    def get_farm_update(self, farm_id: int) -> Optional[schemas.FarmUpdateOut]:
        with self._session_factory() as db:
            entry = crud.get_farm_update(db, farm_id)
            return schemas.FarmUpdateOut.model_validate(entry) if entry else None

    def get_farm_count(self) -> int:
        return self._config.next_farm_id

    def check_farm_existence(self, name: str) -> bool:
        with self._session_factory() as db:
            return crud.exists_by_name(db, name)
