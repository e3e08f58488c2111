"""Environment-backed settings.

``PRINT_API_URL`` has no default: a missing URL stops startup instead of
pointing the client at a host that does not exist.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from posprint.domain.exceptions import ConfigurationError
from posprint.domain.model.documents import RestaurantInfo

DEFAULT_TIMEOUT = 5.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    PRINT_API_URL: str
    PRINT_API_TIMEOUT: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    PRINT_HEALTH_INTERVAL: float = Field(default=60.0, gt=0)
    PRINT_HEALTH_RETRIES: int = Field(default=2, ge=0)
    ORDER_STORE_PATH: Path = Path("data") / "orders.json"

    RESTAURANT_NAME: str = "Salóndescomunal"
    RESTAURANT_ADDRESS: str = "Cl. 75 #20c-21, Bogotá"
    RESTAURANT_PHONE: str = "+57 314 7137999"
    RESTAURANT_TAX_ID: str = "NIT: 901.180.886-8"

    @field_validator("PRINT_API_URL")
    @classmethod
    def _url_is_http(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("PRINT_API_URL must not be empty")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"PRINT_API_URL must be an http(s) URL, got {value!r}")
        return value

    @property
    def restaurant(self) -> RestaurantInfo:
        return RestaurantInfo(
            name=self.RESTAURANT_NAME,
            address=self.RESTAURANT_ADDRESS,
            tax_id=self.RESTAURANT_TAX_ID,
            phone=self.RESTAURANT_PHONE,
        )


def load_settings(env_file: str | Path | None = ".env") -> Settings:
    """Load settings from the environment (and ``env_file`` if present)."""
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)
    try:
        return Settings()
    except ValidationError as exc:
        problems = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid print configuration ({problems})") from exc
