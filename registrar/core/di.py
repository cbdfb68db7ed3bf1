from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provider",
    "Provide",
    "inject",
    "providers",
    "containers",
    "register_loader_containers",
]

import importlib.abc
import importlib.machinery
import sys
import types
import typing as t

import dependency_injector.containers as containers
import dependency_injector.providers as providers
import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import Provide

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:
    return t.cast(t.Callable[P, TReturn], wiring.inject(fn))


class NotReady(object):
    """Placeholder for container values that only exist after boot"""

    _instance: t.ClassVar[NotReady | None] = None

    def __new__(cls) -> NotReady:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<NotReady>"


class AutoLoader(object):
    """
    Wires modules into registered containers as they are imported. Unlike
    dependency_injector.wiring.AutoLoader, registration can be scoped to the
    modules of named packages.
    """

    containers: dict[str | None, list[Container]]
    _path_hook: t.Callable[[str], importlib.abc.PathEntryFinder] | None = None

    def __init__(self) -> None:
        self.containers = {}

    def register_containers(self, *containers: Container, packages: t.Sequence[str] | None) -> None:
        for pkg in packages or [None]:
            self.containers.setdefault(pkg, []).extend(containers)

        if not self.installed:
            self.install()

    def wire_module(self, module: types.ModuleType) -> None:
        for package, ls in self.containers.items():
            if package is None or module.__name__.startswith(package):
                for container in ls:
                    container.wire(modules=[module])

    @property
    def installed(self) -> bool:
        return self._path_hook in sys.path_hooks

    def install(self) -> None:
        if self.installed:
            return

        loader = self

        class SourcelessFileLoader(importlib.machinery.SourcelessFileLoader):
            def exec_module(self, module: types.ModuleType):
                super().exec_module(module)
                loader.wire_module(module)

        class SourceFileLoader(importlib.machinery.SourceFileLoader):
            def exec_module(self, module: types.ModuleType):
                super().exec_module(module)
                loader.wire_module(module)

        class ExtensionFileLoader(importlib.machinery.ExtensionFileLoader): ...

        loader_details = [
            (ExtensionFileLoader, importlib.machinery.EXTENSION_SUFFIXES),
            (SourceFileLoader, importlib.machinery.SOURCE_SUFFIXES),
            (SourcelessFileLoader, importlib.machinery.BYTECODE_SUFFIXES),
        ]

        self._path_hook = importlib.machinery.FileFinder.path_hook(*loader_details)

        sys.path_hooks.insert(0, self._path_hook)
        sys.path_importer_cache.clear()
        importlib.invalidate_caches()

_loader = AutoLoader()


def register_loader_containers(*containers: Container, packages: t.Sequence[str] | None = None) -> None:
    """Register containers in auto-wiring module loader."""
    _loader.register_containers(*containers, packages=packages)
