import os
from dataclasses import dataclass

from dotenv import load_dotenv

MIN_BCRYPT_ROUNDS = 10


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Built once at startup and handed to `create_app`. Set JWT_SECRET in
    production; the default is only good for local development.
    """

    DATABASE_URL: str = "sqlite:///./database/farmlink.db"
    JWT_SECRET: str = "farmlink-dev-secret-change-me"
    TOKEN_TTL_HOURS: int = 24
    BCRYPT_ROUNDS: int = 12
    CORS_ALLOW_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    def __post_init__(self):
        if not self.JWT_SECRET:
            raise ValueError("JWT_SECRET must not be blank")
        if self.BCRYPT_ROUNDS < MIN_BCRYPT_ROUNDS:
            raise ValueError(f"BCRYPT_ROUNDS must be at least {MIN_BCRYPT_ROUNDS}")
        if self.TOKEN_TTL_HOURS < 1:
            raise ValueError("TOKEN_TTL_HOURS must be at least 1")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


def load_config() -> Config:
    # A local .env file, if present, fills in anything not already exported.
    load_dotenv()
    defaults = Config()
    return Config(
        DATABASE_URL=os.environ.get("DATABASE_URL", defaults.DATABASE_URL),
        JWT_SECRET=os.environ.get("JWT_SECRET", defaults.JWT_SECRET),
        TOKEN_TTL_HOURS=int(os.environ.get("TOKEN_TTL_HOURS", defaults.TOKEN_TTL_HOURS)),
        BCRYPT_ROUNDS=int(os.environ.get("BCRYPT_ROUNDS", defaults.BCRYPT_ROUNDS)),
        CORS_ALLOW_ORIGINS=os.environ.get("CORS_ALLOW_ORIGINS", defaults.CORS_ALLOW_ORIGINS),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", defaults.LOG_LEVEL),
        HOST=os.environ.get("HOST", defaults.HOST),
        PORT=int(os.environ.get("PORT", defaults.PORT)),
    )
