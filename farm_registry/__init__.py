from farm_registry.errors import ErrorCode, FarmRegistryError, InsufficientFunds, InvalidAuthorityContract
from farm_registry.registry_service import BURN_ADDRESS, FarmRegistryService, RegistryConfig
from farm_registry.schemas import Currency, FarmCreate, FarmOut, FarmType, FarmUpdateOut
from farm_registry.settings import RegistrySettings
