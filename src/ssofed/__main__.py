import click

from ssofed.cli.authorize import authorize_url
from ssofed.cli.status import status


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """ssofed CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(status)
cli.add_command(authorize_url)
