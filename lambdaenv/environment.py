"""
Subprocess environment construction.

The child process sees, from lowest to highest precedence: the parent's
environment, the assumed role's credentials and the function's region, and
finally the function's own environment variables.
"""

import logging
import subprocess
from typing import Dict, List, Mapping

from .constants import (
    ENV_ACCESS_KEY_ID,
    ENV_DEFAULT_REGION,
    ENV_REGION,
    ENV_SECRET_ACCESS_KEY,
    ENV_SESSION_TOKEN,
)
from .types import AssumedCredentials

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_EXIT_CODE = 127


def credentials_environment(credentials: AssumedCredentials, region: str) -> Dict[str, str]:
    """Return the AWS_* variables for a set of credentials and a region."""
    return {
        ENV_ACCESS_KEY_ID: credentials.access_key_id,
        ENV_SECRET_ACCESS_KEY: credentials.secret_access_key,
        ENV_SESSION_TOKEN: credentials.session_token,
        ENV_REGION: region,
        ENV_DEFAULT_REGION: region,
    }


def build_environment(
    credentials: AssumedCredentials,
    region: str,
    function_variables: Mapping[str, str],
    base_environment: Mapping[str, str]
) -> Dict[str, str]:
    """
    Merge the layers of the child process environment.

    Args:
        credentials: Credentials of the assumed execution role
        region: Region the function runs in
        function_variables: Environment variables configured on the function
        base_environment: Environment of the current process

    Returns:
        New mapping; the inputs are not modified
    """
    environment = dict(base_environment)
    environment.update(credentials_environment(credentials, region))
    environment.update({k: str(v) for k, v in function_variables.items()})
    return environment


def run_command(command: List[str], environment: Mapping[str, str]) -> int:
    """
    Run a command with the given environment and wait for it.

    The command is executed directly, not through a shell, and inherits
    stdin, stdout and stderr.

    Args:
        command: Program and arguments
        environment: Complete environment of the child

    Returns:
        Exit code of the child, 127 if the program was not found
    """
    if not command:
        raise ValueError("No command given")

    logger.debug(f"Running {command[0]} with {len(environment)} environment variable(s)")
    try:
        completed = subprocess.run(command, env=dict(environment), check=False)
    except FileNotFoundError:
        logger.error(f"Command not found: {command[0]}")
        return COMMAND_NOT_FOUND_EXIT_CODE
    return completed.returncode
