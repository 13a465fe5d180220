from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from app.models.config import ApiKeyConfig, PaymentConfig, PricesConfig, ThrottlingConfig, ThrottlingPeriod
from app.models.tier import DEFAULT_PLANS, Plan, Tier
from app.utils.filesystem import get_project_root


class Settings(BaseSettings):
    debug: bool = True
    service_name: str = "Price Alert API"
    version: str = "1.0.0"
    sentry_dsn: Optional[str] = None
    public_base_url: str = "http://localhost:8123"
    payment: PaymentConfig = PaymentConfig()
    plans: Dict[Tier, Plan] = Field(default_factory=lambda: dict(DEFAULT_PLANS))
    default_plan: Tier = Tier.BASIC
    api_key: ApiKeyConfig = ApiKeyConfig()
    free_tier: ThrottlingConfig = ThrottlingConfig(limit=100, period=ThrottlingPeriod.HOURLY)
    prices: PricesConfig = PricesConfig()

    model_config = SettingsConfigDict(
        env_file=get_project_root() / ".env",
        env_nested_delimiter="__",
        yaml_file=get_project_root() / "config.yaml",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, dotenv_settings, YamlConfigSettingsSource(settings_cls)


settings = Settings()
