from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./kitchen_ledger.db"
    sql_echo: bool = False

    log_level: str = "INFO"

    # Upper bound for a duplicate-merge transaction (PostgreSQL only, 0 disables)
    consolidation_statement_timeout_ms: int = 0

    class Config:
        env_file = ".env"


settings = Settings()
