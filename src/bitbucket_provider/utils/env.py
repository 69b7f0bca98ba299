"""Environment variable utility functions for the Bitbucket provider."""

import os


def is_env_ssl_verify(
    env: dict[str, str], env_var_name: str, default: str = "true"
) -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to false values.

    Args:
        env: Explicit environment values, checked before the process environment
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True unless explicitly set to false values
    """
    return getenv(env, env_var_name, default).lower() not in ("false", "0", "no")


def getenv(
    env: dict[str, str], env_var_name: str, default: str | None = None
) -> str | None:
    """Retrieve the value of an environment variable.

    The provided `env` dictionary is checked first, the process environment second.

    Args:
        env (dict[str, str]): A dictionary containing environment variables and their values.
        env_var_name (str): The name of the environment variable to retrieve.
        default (str | None): Value returned when the variable is set nowhere.

    Returns:
        str | None: The value of the environment variable if found, otherwise the default.
    """
    return env.get(env_var_name, os.getenv(env_var_name, default))
