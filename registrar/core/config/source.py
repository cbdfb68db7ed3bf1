import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import registrar.lib.util as util
from registrar.model import DeploymentEnvironment

SkipKeys: t.Final[frozenset[str]] = frozenset({"env", "root", "override"})


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]


class SettingsCurrentState(CurrentState, total=False):
    override: t.Required[tuple[str, ...]]


def load_paths(state: CurrentState) -> list[Path]:
    """The config root, then the environment's own directory under `env.d/`"""
    root = state["root"]
    if root.scheme != "file" or root.path is None:
        raise SettingsError(f"{root} is not a legible location of YAML files")
    paths = [Path(root.path)]
    if state["env"] is not DeploymentEnvironment.Local:
        # local/ has no directory of its own, it is just the root
        paths.append(Path(root.path) / "env.d" / state["env"].value)
    return paths


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in SkipKeys:
                continue
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class OverrideSettingsSource(SettingsSource):
    """`-o storage.persistent.database.port=5433` style overrides; values are parsed as YAML"""

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        od: dict[str, t.Any] = {}
        for o in current_state.get("override", ()):
            if "=" not in o:
                raise SettingsError(f"override must have the form key.path=value: {o!r}")
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            *path, key = k.split(".")
            for part in path:
                target = target.setdefault(part, {})
            target[key] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.parsed_options:
            raise KeyError(field_name)
        value = self.parsed_options[field_name]
        return value, field_name, isinstance(value, dict)


class YAMLCascadingSettingsSource(SettingsSource):
    """
    Reads `<field>.yaml` from each of the load paths; files further down the
    cascade are merged over the ones before them.
    """

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        return load_paths(t.cast(CurrentState, self.current_state))

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        yamls: list[str] = []
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        if not isinstance(value, list):
            raise ValueError(field_name)
        docs = [yaml.safe_load(y) for y in t.cast(list[str], value)]
        if not all(isinstance(d, dict) for d in docs):
            return docs[-1]
        return util.deep_merge(*docs)


class YAMLSecretsSource(SettingsSource):
    """Reads the first `secrets.yaml` found walking the load paths from most to least specific"""

    @functools.cached_property
    def secrets(self) -> dict[str, t.Any]:
        for path in reversed(load_paths(t.cast(CurrentState, self.current_state))):
            fn = path / "secrets.yaml"
            if fn.exists():
                return yaml.safe_load(fn.read_text(encoding="utf8")) or {}
        return {}

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.secrets:
            raise KeyError(field_name)
        value = self.secrets[field_name]
        return value, field_name, isinstance(value, dict)
