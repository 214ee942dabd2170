"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
RoutePath = Annotated[str, Field(min_length=1, pattern=r"^/")]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS512",
        validation_alias="JWT_ALGORITHM",
    )
    token_ttl_seconds: PositiveInt = Field(
        default=864_000,
        validation_alias="TOKEN_TTL_SECONDS",
    )
    password_min_length: PositiveInt = Field(default=6, validation_alias="PASSWORD_MIN_LENGTH")
    password_max_length: PositiveInt = Field(default=20, validation_alias="PASSWORD_MAX_LENGTH")
    bcrypt_rounds: Annotated[int, Field(ge=4, le=31)] = Field(
        default=12,
        validation_alias="BCRYPT_ROUNDS",
    )
    sign_up_path: RoutePath = Field(default="/person/sign-up", validation_alias="SIGN_UP_PATH")
    login_path: RoutePath = Field(default="/login", validation_alias="LOGIN_PATH")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias="CORS_ALLOW_ORIGINS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def _validate_password_bounds(self) -> "Settings":
        if self.password_max_length < self.password_min_length:
            raise ValueError("PASSWORD_MAX_LENGTH must not be lower than PASSWORD_MIN_LENGTH")
        return self


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
