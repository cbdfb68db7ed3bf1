"""`registrar` command line: boots the container, then dispatches to a command module."""

from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import registrar
import registrar.lib.cli as click
from registrar.core import RegistrarContainer
from registrar.core.error import AppError
from registrar.model import DeploymentEnvironment

COMMANDS: t.Final[tuple[str, ...]] = ("schema", "transcript")
DEFAULT_CONFIG_ROOT: t.Final[Path] = Path(registrar.__file__).resolve().parents[1] / "config"

# command modules loaded for this invocation, wired when the container boots
_loaded: list[types.ModuleType] = []
_booted = False


class CommandLoader(click.Group):
    """Imports `registrar.cli.<name>` only when that command is invoked"""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(COMMANDS)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in COMMANDS:
            return None
        module = importlib.import_module(f"{__package__}.{cmd_name}")
        _loaded.append(module)
        return getattr(module, cmd_name)


@click.group(cls=CommandLoader)
@click.version_option(registrar.__version__, prog_name="registrar")
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=DEFAULT_CONFIG_ROOT, type=click.URIParamType(dir_ok=True))
@click.option("-s", "--secrets-path", default=None, type=click.URIParamType(dir_ok=True))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value, e.g. -o transcript.max_workers=8",
)
@click.option("-D", "--debug", is_flag=True, default=False, help="Verbose logging and tracebacks")
@click.pass_obj
def main(
    ct: RegistrarContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    secrets_path: p.AnyUrl | None,
    override: tuple[str, ...],
    debug: bool,
):
    global _booted
    RegistrarContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        secrets_path=secrets_path,
        override=override,
        wiring=tuple(_loaded),
    )
    _booted = True


def exit_code(ex: Exception) -> int:
    if isinstance(ex, click.ClickException):
        return ex.exit_code
    if isinstance(ex, AppError):
        return 2
    return -1


def execute_command(*argv: str) -> None:
    threading.current_thread().name = "registrar-0"
    prog, *args = argv or sys.argv
    container = RegistrarContainer()

    try:
        with main.make_context(Path(prog).name, args=args) as ctx:
            ctx.obj = container
            sys.exit(t.cast(int, main.invoke(ctx)))
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
        debug = container.debug() if _booted else "-D" in args or "--debug" in args
        if debug:
            traceback.print_exc()
        sys.exit(exit_code(ex))
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)
