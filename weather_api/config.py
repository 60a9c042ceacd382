"""Application configuration pulled from environment variables via pydantic."""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CONTRACT_DIR = Path(__file__).resolve().parent.parent / "contract"


class Settings(BaseSettings):
    """Environment-driven configuration for the weather forecast service."""
    model_config = SettingsConfigDict(env_prefix="WEATHER_", extra="ignore")

    environment: str = "development"  # options: development, production
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # Fixed seed switches the generator into deterministic test mode.
    random_seed: int | None = None
    simulated_delay_ms: int = 10
    stub_server_port: int = 9000
    contract_dir: Path = _DEFAULT_CONTRACT_DIR

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        """Normalize log levels so "debug" and "DEBUG" behave the same."""
        return str(v).strip().upper()

    @field_validator("environment", mode="after")
    @classmethod
    def lower_environment(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("simulated_delay_ms", mode="after")
    @classmethod
    def non_negative_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("simulated_delay_ms must be >= 0")
        return v

    @property
    def docs_enabled(self) -> bool:
        """Swagger UI and the OpenAPI document are served in development only."""
        return self.environment == "development"


settings = Settings()


if __name__ == "__main__":
    print(settings.model_dump_json(indent=4))
