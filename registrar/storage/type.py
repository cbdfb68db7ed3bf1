import typing as t

from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import String

from registrar.model.id import KEY_LENGTH, ShortUUIDKey

K = t.TypeVar("K", bound=ShortUUIDKey)


class ShortUUIDKeyType(TypeDecorator[K]):
    """Persists only the shortuuid part of a key; the prefix is restored from `key_type` on load"""

    impl = String
    cache_ok = True

    def __init__(self, key_type: type[K]):
        self.key_type = key_type
        super().__init__(KEY_LENGTH)

    def process_bind_param(self, value: K | str | None, dialect: Dialect) -> str | None:
        if value is None:
            return value
        if not isinstance(value, self.key_type):
            value = self.key_type(value)
        return value.key

    def process_result_value(self, value: str | None, dialect: Dialect) -> K | None:
        if value is not None:
            return self.key_type(key=value)
        return value
