# farm_registry/settings.py
from pydantic_settings import BaseSettings


class RegistrySettings(BaseSettings):
    database_url: str = "sqlite:///:memory:"
    max_farms: int = 1000
    registration_fee: int = 1000

    class Config:
        env_prefix = "FARM_REGISTRY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
