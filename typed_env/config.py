"""Library settings loaded from TYPED_ENV_* environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from typed_env.enums import Scope


class TypedEnvSettings(BaseSettings):
    """Settings for typed environment variable access.

    Prefix: TYPED_ENV_ (e.g., TYPED_ENV_DEFAULT_SCOPE=user)
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPED_ENV_",
        extra="ignore",
    )

    default_scope: Scope = Field(
        default=Scope.PROCESS,
        description="Scope used when an accessor is constructed without one.",
    )

    # Windows registry tables backing the user and machine scopes
    user_registry_key: str = Field(
        default="Environment",
        description="Subkey of HKEY_CURRENT_USER holding user-scope variables.",
    )
    machine_registry_key: str = Field(
        default="SYSTEM\\CurrentControlSet\\Control\\Session Manager\\Environment",
        description="Subkey of HKEY_LOCAL_MACHINE holding machine-scope variables.",
    )


def get_settings() -> TypedEnvSettings:
    """Load settings from the current process environment.

    Not cached: a changed TYPED_ENV_* variable is picked up by the next
    accessor that is constructed.
    """

    return TypedEnvSettings()
