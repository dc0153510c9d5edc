from __future__ import annotations

import click

from coach_advisor.cli.context import CLIContext, build_context


def _register_commands(cli_group: click.Group) -> None:
    from coach_advisor.cli.commands import diagnostics, estimates, library, validation

    for module in (
        diagnostics,
        estimates,
        validation,
        library,
    ):
        module.register(cli_group)


@click.group()
@click.option("--db-url", type=str, default=None, help="Override Postgres DSN for this session.")
@click.option(
    "--memory",
    is_flag=True,
    default=False,
    help="Use in-memory benchmark/interaction stores instead of Postgres.",
)
@click.pass_context
def cli(ctx: click.Context, db_url: str | None, memory: bool) -> None:
    """coach-advisor CLI."""
    ctx.obj = build_context(db_url, use_memory=memory)
    ctx.call_on_close(ctx.obj.close)


_register_commands(cli)


def main() -> None:
    cli()


__all__ = ["CLIContext", "cli", "main"]
