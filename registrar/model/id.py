from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

KEY_LENGTH: t.Final[int] = 22


class ShortUUIDKey(str):
    """
    A prefixed shortuuid, e.g. `stdn$Yk3nKQ6bX8cJ2mWq9RzT4v`. Only the
    shortuuid part is persisted, the prefix identifies the entity kind.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str]

    @classmethod
    def validate_str(cls, v: ShortUUIDKey | str | None, _: p.ValidationInfo) -> ShortUUIDKey | None:
        return cls(v) if v is not None else v

    @classmethod
    def __get_pydantic_json_schema__(cls, src: t.Any, handler: p.GetJsonSchemaHandler) -> p.json_schema.JsonSchemaValue:
        return {
            "type": "string",
            "pattern": f"^{cls.prefix}\\{cls.separator}[0-9A-Za-z]{{{KEY_LENGTH}}}$",
        }

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str_schema = core_schema.chain_schema([
            core_schema.str_schema(),
            core_schema.with_info_after_validator_function(cls.validate_str, schema=core_schema.str_schema()),
        ])

        return core_schema.json_or_python_schema(
            json_schema=from_str_schema,
            python_schema=core_schema.union_schema([
                core_schema.is_instance_schema(cls),
                from_str_schema,
            ]),
            serialization=core_schema.plain_serializer_function_ser_schema(cls.__str__),
        )

    @p.validate_call
    def __init_subclass__(cls, prefix: t.Annotated[str, ant.Len(4)], separator: t.Annotated[str, ant.Len(1)] = "$"):
        super().__init_subclass__()
        cls.prefix = prefix
        cls.separator = separator

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        """
        `s` is a complete, prefixed key and is validated; `key` is the bare
        shortuuid as read back from storage and is trusted. With neither, a
        new key is generated.
        """
        if key is None:
            if s is None:
                key = shortuuid.uuid()
            else:
                cls.check(s)
                return super().__new__(cls, s)
        return super().__new__(cls, cls.separator.join((cls.prefix, key)))

    @classmethod
    def check(cls, s: str) -> None:
        head = cls.prefix + cls.separator
        if not s.startswith(head):
            raise ValueError(f"invalid {cls.__name__}: key must begin with {head}")
        body = s[len(head) :]
        if len(body) != KEY_LENGTH:
            raise ValueError(f"invalid {cls.__name__}: key must have length {KEY_LENGTH}")
        alphabet = shortuuid.get_alphabet()
        if any(c not in alphabet for c in body):
            raise ValueError(f"invalid {cls.__name__}: key must comprise only {alphabet}")

    @classmethod
    def is_valid(cls, s: t.Any) -> bool:
        if isinstance(s, cls):
            return True
        if not isinstance(s, str):
            return False
        try:
            cls.check(s)
        except ValueError:
            return False
        return True

    @property
    def key(self) -> str:
        return self[len(self.prefix) + len(self.separator) :]

    def __hash__(self) -> int:
        return str.__hash__(self)

    def __str__(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.key!s}>"


# fmt: off
class StudentID(ShortUUIDKey, prefix="stdn"): ...
class UserID(ShortUUIDKey, prefix="user"): ...
class TestID(ShortUUIDKey, prefix="test"): ...
class SubjectID(ShortUUIDKey, prefix="subj"): ...
class BlockID(ShortUUIDKey, prefix="blck"): ...
class TestResultID(ShortUUIDKey, prefix="tres"): ...
class CalculationID(ShortUUIDKey, prefix="calc"): ...
class JobID(ShortUUIDKey, prefix="tjob"): ...
# fmt: on
