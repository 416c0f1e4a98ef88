from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    SECRET_KEY: str = "change-me"
    DATABASE_URL: str = "sqlite:///./inkwell.db"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Session tokens
    TOKEN_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_MINUTES: int = 60
    TOKEN_COOKIE_NAME: str = "token"

    BCRYPT_ROUNDS: int = 12

    APP_TITLE: str = "Inkwell"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
