from typing import Any

import click

from ssofed.auth.availability import is_enabled, is_forced, missing_settings
from ssofed.auth.config import DEFAULT_PREFIX, resolve_provider_config
from ssofed.cli.utils import configure_logging, load_source, output_error, output_result


@click.command(name="status")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file")
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True, help="Config key prefix")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def status(config_path: str | None, prefix: str, json_output: bool, debug: bool) -> None:
    """Show whether SSO sign-in is available and which endpoints it will use.

    \b
    Examples:
        ssofed status
        ssofed status --config deploy/sso.yaml --json-output
    """
    configure_logging(debug)

    try:
        source = load_source(config_path)
        config = resolve_provider_config(source, prefix)
        result: dict[str, Any] = {
            "enabled": is_enabled(source, prefix),
            "forced": is_forced(source, prefix),
            "missing": missing_settings(source, prefix),
            "endpoints": {
                "authorize": config.authorize_url,
                "token": config.token_url,
                "user": config.user_url,
            },
            "scopes": config.scopes,
            "pkce": config.pkce,
            "http_verify": config.http_verify,
            "data_wrap_key": config.data_wrap_key,
            "required_fields": config.required_fields,
        }
    except (FileNotFoundError, ValueError) as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        output_result(result, json_output)
        return

    if result["enabled"]:
        label = "enabled (forced)" if result["forced"] else "enabled"
        click.echo(f"SSO sign-in: {click.style(label, fg='green')}")
    else:
        click.echo(f"SSO sign-in: {click.style('disabled', fg='yellow')}")
        click.echo(f"  missing settings: {', '.join(result['missing'])}")

    for name, url in result["endpoints"].items():
        click.echo(f"  {name:<10} {url}")
    click.echo(f"  scopes     {' '.join(config.scopes) or '-'}")
    if not config.http_verify:
        click.echo(click.style("  TLS verification is disabled", fg="red"))
