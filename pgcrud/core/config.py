import os
import sys
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator, field_validator


_ENV_LOADED = False

_TRUE_VALUES = ("true", "1", "yes", "y", "on")
_FALSE_VALUES = ("false", "0", "no", "n", "off")
_LOG_LEVELS = ("DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _load_env_file(path: str, allow_override: bool = False) -> None:
    """
    Minimal .env loader: loads KEY=VALUE pairs into os.environ.
    - Ignores empty lines and lines starting with '#'
    - Supports values wrapped in single or double quotes
    - By default, does not override existing environment variables
    """
    if not path or not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):].strip()
                if "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]
                if allow_override or key not in os.environ:
                    os.environ[key] = value
    except PermissionError as e:
        print(f"FATAL: Permission denied reading environment file {path}: {e}", file=sys.stderr)
        raise


def load_env_if_present(force_reload: bool = False) -> None:
    """
    Load environment variables from .env files in order of precedence:
    1. .env.local (highest priority, not committed)
    2. .env.{ENVIRONMENT} (environment-specific)
    3. .env.common (common variables)
    4. .env (default)
    PGCRUD_ENV_FILE replaces the whole list with a single file.
    """
    global _ENV_LOADED
    if _ENV_LOADED and not force_reload:
        return

    custom = os.environ.get("PGCRUD_ENV_FILE")
    if custom:
        _load_env_file(custom, allow_override=False)
    else:
        env_files = ['.env.local', '.env.common', '.env']
        environment = os.environ.get('ENVIRONMENT', '').strip()
        if environment:
            env_files.insert(1, f'.env.{environment}')

        for env_file in env_files:
            _load_env_file(env_file, allow_override=False)

    _ENV_LOADED = True


class Settings(BaseModel):
    """
    pgcrud settings from environment variables.
    """
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    # Database connection
    postgres_user: str = Field("postgres", alias="POSTGRES_USER")
    postgres_password: str = Field("", alias="POSTGRES_PASSWORD")
    postgres_db: str = Field("postgres", alias="POSTGRES_DB")
    postgres_host: str = Field("localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(5432, alias="POSTGRES_PORT")

    # Pool used by pgcrud.db.pool.init_pool
    pool_min_size: int = Field(1, alias="PGCRUD_POOL_MIN_SIZE", ge=0)
    pool_max_size: int = Field(10, alias="PGCRUD_POOL_MAX_SIZE", ge=1)
    pool_timeout: float = Field(30.0, alias="PGCRUD_POOL_TIMEOUT", gt=0)

    # Logging
    log_level: str = Field("INFO", alias="PGCRUD_LOG_LEVEL")
    log_json: bool = Field(False, alias="PGCRUD_LOG_JSON")

    @field_validator('postgres_user', 'postgres_db', 'postgres_host', mode='before')
    def validate_not_empty_str(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Value cannot be empty or whitespace only")
        return v.strip()

    @field_validator('log_json', mode='before')
    def coerce_bool(cls, v):
        if isinstance(v, bool):
            return v
        if not isinstance(v, str):
            raise ValueError("Expected string for boolean field")
        val = v.strip().lower()
        if val in _TRUE_VALUES:
            return True
        if val in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean value: {v}")

    @field_validator('log_level', mode='before')
    def normalize_log_level(cls, v):
        val = str(v).strip().upper()
        if val not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Expected one of {list(_LOG_LEVELS)}")
        return val

    @field_validator('postgres_port')
    def validate_port(cls, v):
        if v < 1 or v > 65535:
            raise ValueError(f"Invalid port number: {v}")
        return v

    @model_validator(mode='after')
    def validate_pool_bounds(self):
        if self.pool_max_size < self.pool_min_size:
            raise ValueError(
                f"PGCRUD_POOL_MAX_SIZE ({self.pool_max_size}) must be >= "
                f"PGCRUD_POOL_MIN_SIZE ({self.pool_min_size})"
            )
        return self

    @property
    def conn_string(self) -> str:
        """libpq key/value connection string"""
        parts = [
            f"dbname={self.postgres_db}",
            f"user={self.postgres_user}",
            f"host={self.postgres_host}",
            f"port={self.postgres_port}",
        ]
        if self.postgres_password:
            parts.insert(2, f"password={self.postgres_password}")
        return " ".join(parts)

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to os.environ); unset keys keep defaults."""
        env = os.environ if env is None else env
        aliases = [field.alias for field in cls.model_fields.values() if field.alias]
        return cls(**{alias: env[alias] for alias in aliases if alias in env})


_settings: Optional[Settings] = None


def get_settings(reload: bool = False) -> Settings:
    """
    Get pgcrud settings. Reads .env files and the environment on first call.
    Set reload=True to force reloading from current environment.
    """
    global _settings
    if _settings is None or reload:
        load_env_if_present(force_reload=reload)
        _settings = Settings.from_env()
    return _settings
