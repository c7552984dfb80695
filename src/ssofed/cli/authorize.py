import click

from ssofed.auth.authorize import generate_nonce
from ssofed.auth.availability import is_enabled, missing_settings
from ssofed.auth.config import DEFAULT_PREFIX, resolve_provider_config
from ssofed.auth.contracts import SsoError
from ssofed.auth.flow import SsoLoginFlow
from ssofed.auth.session import NONCE_KEY, InMemorySession
from ssofed.cli.utils import configure_logging, load_source, output_error, output_result


@click.command(name="authorize-url")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file")
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True, help="Config key prefix")
@click.option("--state", help="State value to send (random when omitted)")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def authorize_url(
    config_path: str | None,
    prefix: str,
    state: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Print an authorization URL with a fresh nonce.

    Useful to check a deployment's redirect against the identity service by hand.
    """
    configure_logging(debug)

    try:
        source = load_source(config_path)
        if not is_enabled(source, prefix):
            missing = ", ".join(missing_settings(source, prefix))
            raise ValueError(f"SSO is not configured; missing settings: {missing}")

        flow = SsoLoginFlow(resolve_provider_config(source, prefix))
        session = InMemorySession({NONCE_KEY: generate_nonce()})
        request = flow.start(session, state=state)
    except (FileNotFoundError, ValueError, SsoError) as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        output_result(request.model_dump(exclude={"pkce": {"verifier"}}), json_output)
    else:
        output_result(request.url)
