from __future__ import annotations

import datetime
import os
import sys
import types
from pathlib import Path

import pydantic as p
import xdg_base_dirs as xdg
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import registrar
from registrar.model import DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady, register_loader_containers
from ..provider import LoggingProvider, TimestampProvider
from .storage import StorageContainer
from .transcript import TranscriptContainer


def provide_xdg_state() -> Path:
    stp = xdg.xdg_state_home() / "registrar"
    stp.mkdir(parents=True, exist_ok=True)
    return stp


class RegistrarContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment, DeploymentEnvironment.Local.value)
    root: Object[NotReady | Path] = Object(NotReady())
    state_path: Provider[Path] = Resource(provide_xdg_state)

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    utcnow: Provider[TimestampProvider] = Object(lambda: datetime.datetime.now(datetime.UTC))

    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, debug=debug, logging=logging, root=root
    )
    transcript: Provider[TranscriptContainer] = Container(
        TranscriptContainer,
        config=config.transcript,
        logging=logging,
        state_path=state_path,
        utcnow=utcnow,
        session_factory=storage.persistent.session.provider,
    )

    @staticmethod
    def boot(
        ct: RegistrarContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)
        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(registrar.__file__)).parent)

        ct.wire(packages=["registrar.storage", "registrar.transcript"])
        if wiring:
            ct.wire(modules=wiring)
        if imported := [mod for name, mod in sys.modules.items() if name.startswith("registrar.")]:
            ct.wire(modules=imported)
        register_loader_containers(ct, packages=["registrar"])

        logger = ct.logging().get_logger()
        for key, _, value in (ov.partition("=") for ov in ps.override):
            logger.info("overriding configuration parameter", extra={"key": key, "value": value})

        secrets = Secrets(env=env, root=secrets_path or config_root)
        ct.secrets.from_pydantic(secrets)

        logger.debug("configuration finished", extra={"config": str(config_root), "env": env.value})
