from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for phone verification codes and the reset script

    # Mail (SMTP relay used for verification codes)
    mail_username: str = ""
    mail_password: str = ""
    mail_from: str = "onboarding@example.com"
    mail_from_name: str = "IPR Verification"
    mail_server: str = "localhost"
    mail_port: int = 587
    mail_starttls: bool = True
    mail_ssl_tls: bool = False

    # Investment rules
    group_capacity: int = 25
    price_per_contract: int = 10000
    monthly_payout_per_contract: int = 1800
    max_payout_cycles: int = 60
    group_number_prefix: str = "IPR"
    verification_code_ttl_minutes: int = 10

    # App
    app_name: str = "groupvest-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
