import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import SettingsConfigDict

from registrar.model import BaseModel


# NOTE: BaseModel contributes serialize_by_alias, which dictConfig needs for `class`
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    model_config = SettingsConfigDict(env_prefix="REGISTRAR_", extra="forbid", populate_by_name=True)

    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")
