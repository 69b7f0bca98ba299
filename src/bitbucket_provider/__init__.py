import json
import sys

import click
from dotenv import load_dotenv

__version__ = "0.1.0"

from .bitbucket_server.config import BitbucketServerIntegrationConfig
from .bitbucket_server.oauth import load_authenticators
from .bitbucket_server.resolver import EndpointResolver
from .logging_config import log_operation, setup_logger


@click.command()
@click.version_option(__version__, prog_name="bitbucket-server-provider")
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--server-endpoints",
    help="Comma-separated Bitbucket Server URLs (e.g., https://bitbucket.example.com)",
)
@click.option("--oauth-endpoint", help="Bitbucket Server URL with OAuth configured")
@click.option("--api-endpoint", help="Public API endpoint of the hosting application")
@click.option("--oauth-consumer-key", help="OAuth consumer key of the application link")
@click.option("--oauth-private-key", help="OAuth private key of the application link")
def main(
    verbose: int,
    env_file: str | None,
    server_endpoints: str | None,
    oauth_endpoint: str | None,
    api_endpoint: str | None,
    oauth_consumer_key: str | None,
    oauth_private_key: str | None,
) -> None:
    """Bitbucket Server Provider - resolve which API client the configuration selects.

    Prints the decision as JSON. Exits with status 1 on a configuration error.
    """
    if verbose == 1:
        logger = setup_logger(level="INFO")
    elif verbose >= 2:
        logger = setup_logger(level="DEBUG")
    else:
        logger = setup_logger()

    if env_file:
        logger.debug(f"Loading environment from file: {env_file}")
        load_dotenv(env_file)
    else:
        load_dotenv()

    # Command line options take precedence over the environment
    overrides = {
        "BITBUCKET_SERVER_ENDPOINTS": server_endpoints,
        "BITBUCKET_OAUTH_ENDPOINT": oauth_endpoint,
        "BITBUCKET_API_ENDPOINT": api_endpoint,
        "BITBUCKET_OAUTH_CONSUMER_KEY": oauth_consumer_key,
        "BITBUCKET_OAUTH_PRIVATE_KEY": oauth_private_key,
    }
    config = BitbucketServerIntegrationConfig.from_env(
        {key: value for key, value in overrides.items() if value is not None}
    )

    with log_operation(logger, "resolve"):
        decision, error = EndpointResolver.try_resolve(
            config.server_endpoints,
            config.oauth_endpoint,
            config.api_endpoint,
            load_authenticators(config),
        )

    if error is not None:
        click.echo(f"Configuration error: {error}", err=True)
        sys.exit(1)

    click.echo(json.dumps(decision.to_dict()))


__all__ = ["main", "__version__"]

if __name__ == "__main__":
    main()
