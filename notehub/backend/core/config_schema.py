"""
Configuration Schemas.

One strict model per file in config/settings/ (see config.CONFIG_SECTIONS).
Unknown keys, missing keys and out-of-range values fail at startup with
the offending file named, never later inside a request.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

Port = Annotated[int, Field(ge=1, le=65535)]


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: Port


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    # Seconds the readiness probe waits for all dependency checks together
    readiness: PositiveInt


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: Literal["development", "testing", "staging", "production"]
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class RedisSchema(_StrictBase):
    host: str
    port: Port
    db: int = Field(ge=0)


class DatabaseSchema(_StrictBase):
    # A full URL wins over host/port/name; DATABASE_URL wins over both
    url: str | None = None
    host: str
    port: Port
    name: str
    user: str
    pool_size: PositiveInt
    max_overflow: int = Field(ge=0)
    pool_timeout: PositiveInt
    pool_recycle: int
    echo: bool
    redis: RedisSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: PositiveInt
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_docs_enabled: bool
    # Consume change deltas from Redis into this process's hub
    events_enabled: bool
    # Publish change deltas to Redis instead of straight into the local hub
    events_publish_enabled: bool
    # Serve /publications/{name}/live WebSockets
    publications_live_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: Literal["HS256", "HS384", "HS512"]
    access_token_expire_minutes: PositiveInt
    audience: str


class PasswordPolicySchema(_StrictBase):
    # bcrypt reads at most 72 bytes, so a longer minimum could never be met
    min_length: int = Field(ge=1, le=72)


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    passwords: PasswordPolicySchema
    admin_emails: list[str]


# =============================================================================
# events.yaml
# =============================================================================


class EventCircuitBreakerSchema(_StrictBase):
    fail_max: PositiveInt
    timeout_duration: PositiveInt


class EventRetrySchema(_StrictBase):
    max_attempts: PositiveInt
    backoff_multiplier: float = Field(ge=0)
    backoff_max: float = Field(ge=0)


class PublicationsSchema(_StrictBase):
    # Deltas buffered per live subscriber; one more and it is closed with 1013
    subscriber_queue_size: PositiveInt


class EventsSchema(_StrictBase):
    channel_prefix: str
    circuit_breaker: EventCircuitBreakerSchema
    retry: EventRetrySchema
    publications: PublicationsSchema
