from functools import lru_cache
import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class RoleEngineSettings(BaseSettings):
    core_count: int = 4  # roles counted from the top of the ranking
    peripheral_count: int = 3  # roles counted from the bottom
    catalog_path: str = "assets/roles.yml"
    results_path: str = "assets/user_results.yml"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix='ROLE_ENGINE_')

    @field_validator('core_count', 'peripheral_count')
    @classmethod
    def non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("tier counts must be non-negative")
        return value


@lru_cache()
def get_settings() -> RoleEngineSettings:
    return RoleEngineSettings()


if __name__ == "__main__":
    # For testing the configuration loading
    settings = get_settings()
    print("Role Engine Configuration:")
    print(f"  Core count: {settings.core_count}")
    print(f"  Peripheral count: {settings.peripheral_count}")
    print(f"  Catalog path: {settings.catalog_path}")
    print(f"  Results path: {settings.results_path}")
    print(f"  Log level: {settings.log_level}")
    print("\nTo override, set environment variables like ROLE_ENGINE_CORE_COUNT, ROLE_ENGINE_PERIPHERAL_COUNT, ROLE_ENGINE_CATALOG_PATH.")
