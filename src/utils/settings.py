"""Environment-backed configuration.

Settings are read once at startup and passed explicitly to whatever needs
them (application context, admin scripts).
"""

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    mongo_url: str | None = None
    database_name: str = 'crawlly'
    environment: str = 'development'
    log_level: str = 'INFO'
    bcrypt_rounds: int = 10
    api_key_header: str = 'X-API-Key'
    cors_origins: list[str] | str = field(default='*')

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables (call load_dotenv() first)."""
        cors_env = os.getenv('CORS_ORIGINS', '*')
        if cors_env.strip() == '*':
            cors_origins: list[str] | str = '*'
        else:
            # "origin1, origin2" -> ["origin1", "origin2"]
            cors_origins = [o.strip() for o in cors_env.split(',') if o.strip()]

        return cls(
            port=_env_int('PORT', 8080),
            mongo_url=os.getenv('MONGO_URL') or None,
            database_name=os.getenv('MONGODB_DATABASE', 'crawlly'),
            environment=os.getenv('ENVIRONMENT', 'development'),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            bcrypt_rounds=_env_int('BCRYPT_ROUNDS', 10),
            api_key_header=os.getenv('API_KEY_HEADER', 'X-API-Key'),
            cors_origins=cors_origins,
        )
