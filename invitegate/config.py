import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

from invitegate.exceptions import ConfigError


_MISSING = object()


def _get_env(key: str, cast=str, default=_MISSING, environ=None):
    """Read one variable, cast it, and fail loudly when it can't be used."""
    environ = os.environ if environ is None else environ
    raw = environ.get(key)

    if raw is None or raw == '':
        if default is _MISSING:
            raise ConfigError(f"Missing required environment variable: {key}")
        return default

    if cast is bool:
        lowered = raw.strip().lower()
        if lowered == 'true':
            return True
        if lowered == 'false':
            return False
        raise ConfigError(f"{key} must be a boolean (true/false). Got: \"{raw}\"")

    if cast is int:
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{key} must be a number. Got: \"{raw}\"")

    return cast(raw)


@dataclass(frozen=True)
class Settings:
    port: int
    database_url: str
    jwt_secret: str
    debug: bool = False
    app_env: str = 'development'
    jwt_algorithm: str = 'HS256'
    access_token_expires: timedelta = timedelta(hours=1)
    refresh_token_expires: timedelta = timedelta(days=7)
    password_hash_method: str = 'scrypt'
    log_level: str = 'INFO'
    redis_url: str = 'redis://localhost:6379/0'
    cleanup_interval: timedelta = timedelta(hours=1)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, dotenv: bool = True) -> 'Settings':
        """
        Build settings from the process environment.
        Loads .env.<APP_ENV>.local when present, falling back to .env.
        Raises ConfigError when a required variable is missing or malformed.
        """
        if dotenv and environ is None:
            app_env = os.getenv('APP_ENV', 'development')
            local_env = f'.env.{app_env}.local'
            if os.path.exists(local_env):
                load_dotenv(local_env)
            else:
                load_dotenv()

        return cls(
            port=_get_env('PORT', int, environ=environ),
            database_url=_get_env('DATABASE_URL', environ=environ),
            jwt_secret=_get_env('JWT_SECRET', environ=environ),
            debug=_get_env('DEBUG_MODE', bool, False, environ=environ),
            app_env=_get_env('APP_ENV', default='development', environ=environ),
            access_token_expires=timedelta(
                minutes=_get_env('ACCESS_TOKEN_EXPIRES_MINUTES', int, 60, environ=environ)
            ),
            refresh_token_expires=timedelta(
                days=_get_env('REFRESH_TOKEN_EXPIRES_DAYS', int, 7, environ=environ)
            ),
            password_hash_method=_get_env('PASSWORD_HASH_METHOD', default='scrypt', environ=environ),
            log_level=_get_env('LOG_LEVEL', default='INFO', environ=environ).upper(),
            redis_url=_get_env('REDIS_URL', default='redis://localhost:6379/0', environ=environ),
            cleanup_interval=timedelta(
                minutes=_get_env('CLEANUP_INTERVAL_MINUTES', int, 60, environ=environ)
            ),
        )
