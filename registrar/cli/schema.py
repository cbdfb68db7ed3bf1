from __future__ import annotations

import alembic.command
import alembic.config

import registrar.lib.cli as click
from registrar.core import di

AlembicConfig = di.Provide["storage.persistent.alembic_config"]


@click.group("schema")
def schema(): ...


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, alembic_conf: alembic.config.Config = AlembicConfig):
    alembic.command.current(alembic_conf, verbose=verbose)


@schema.command()
@click.argument("message")
@click.option("--autogenerate/--no-autogenerate", default=True)
@di.inject
def generate(message: str, autogenerate: bool, alembic_conf: alembic.config.Config = AlembicConfig):
    """Write a new revision, by default diffed against the table definitions."""
    alembic.command.revision(alembic_conf, message, autogenerate=autogenerate)


@schema.command()
@click.argument("revision", default="head")
@di.inject
def up(revision: str, alembic_conf: alembic.config.Config = AlembicConfig):
    alembic.command.upgrade(alembic_conf, revision)


@schema.command()
@click.argument("revision")
@di.inject
def down(revision: str, alembic_conf: alembic.config.Config = AlembicConfig):
    alembic.command.downgrade(alembic_conf, revision)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, alembic_conf: alembic.config.Config = AlembicConfig):
    alembic.command.history(alembic_conf, verbose=verbose, indicate_current=True)


@schema.command()
@click.argument("revision")
@di.inject
def stamp(revision: str, alembic_conf: alembic.config.Config = AlembicConfig):
    alembic.command.stamp(alembic_conf, revision)
