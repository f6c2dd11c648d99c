from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Used by the seed script to bypass RLS

    # App
    app_name: str = "emis-party"
    api_version: str = "1"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    # Party
    party_types: str = "Agency,Committee,Team,Other"
    default_party_type: str = "Other"
    party_ownerships: str = "Government,Private,NGO,Other"
    default_party_ownership: str = "Other"
    disaster_phases: str = "Mitigation,Preparedness,Response,Recovery"
    locales: str = "en,sw"
    default_locale: str = "en"
    phone_region: str = "US"  # region used to parse phone numbers without a + prefix

    # Role
    role_types: str = "System,Assignable,Other"
    default_role_type: str = "Other"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def api_prefix(self) -> str:
        return f"/v{self.api_version}"

    def get_cors_origins_list(self) -> List[str]:
        return _split(self.cors_origins)

    def get_party_types_list(self) -> List[str]:
        return _split(self.party_types)

    def get_party_ownerships_list(self) -> List[str]:
        return _split(self.party_ownerships)

    def get_disaster_phases_list(self) -> List[str]:
        return _split(self.disaster_phases)

    def get_locales_list(self) -> List[str]:
        return _split(self.locales)

    def get_role_types_list(self) -> List[str]:
        return _split(self.role_types)

    @model_validator(mode="after")
    def check_allowed_values(self) -> "Settings":
        """Fail fast when a configured default falls outside its allow-list."""
        pairs = [
            ("party_types", self.get_party_types_list(), self.default_party_type),
            ("party_ownerships", self.get_party_ownerships_list(), self.default_party_ownership),
            ("locales", self.get_locales_list(), self.default_locale),
            ("role_types", self.get_role_types_list(), self.default_role_type),
        ]
        for name, allowed, default in pairs:
            if not allowed:
                raise ValueError(f"{name} must list at least one value")
            if default not in allowed:
                raise ValueError(f"default {default!r} is not one of {name} {allowed}")
        if not self.get_disaster_phases_list():
            raise ValueError("disaster_phases must list at least one value")
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
