from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HOMELEDGER_", env_file=".env", extra="ignore")
    DATABASE_URL: str = "sqlite:///./homeledger.db"

    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_MIN: int = 60 * 24
    REFRESH_TOKEN_DAYS: int = 30
    BCRYPT_ROUNDS: int = 12

    UPLOAD_DIR: str = "static/uploads"
    MAX_UPLOAD_MB: int = 10
    EXPIRING_CONTRACT_DAYS: int = 30

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
settings = Settings()
