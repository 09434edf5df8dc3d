from typing import Dict, List, Optional
import argparse
import logging
import os
import sys

from boto3.session import Session
from botocore.exceptions import BotoCoreError, ClientError

from .config import LambdaEnvConfig
from .usage import load_yaml_config, parse_cli_args, merge_configs
from .aws.iam import RevokeFailedError, TrustGrantError, TrustGrantManager
from .aws.lambda_functions import FunctionLookupError, get_function_configuration
from .aws.sessions import create_session
from .environment import build_environment, run_command
from .terraform import TerraformStateError, get_function_from_terraform
from .types import LambdaFunctionTarget
from .utils import InvalidArnError, function_name_from_arn, is_arn, parse_arn
from .output import OutputHandler

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure root logging; INFO chatter stays off unless --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> LambdaEnvConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated LambdaEnvConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
        final_config.escalation_settings()
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        sys.exit(1)

    return final_config


def resolve_function_target(config: LambdaEnvConfig) -> LambdaFunctionTarget:
    """
    Work out which function to run as.

    Args:
        config: Validated configuration

    Returns:
        LambdaFunctionTarget from the function ARN, the function name, or the Terraform state

    Raises:
        InvalidArnError: If the function is given as a malformed ARN
        TerraformStateError: If no function is given and none can be found in Terraform state
    """
    if config.function:
        if is_arn(config.function):
            return LambdaFunctionTarget(
                function_name=function_name_from_arn(config.function),
                region=parse_arn(config.function).region or config.region,
            )
        return LambdaFunctionTarget(function_name=config.function, region=config.region)

    target = get_function_from_terraform(config.terraform_dir)
    if target.region is None:
        target.region = config.region
    return target


def get_env_variables(
    session: Session,
    target: LambdaFunctionTarget,
    config: LambdaEnvConfig,
    base_environment: Optional[Dict[str, str]] = None
) -> Dict[str, str]:
    """
    Build the child environment for a function.

    Args:
        session: boto3 Session of the invoking principal
        target: Function to run as
        config: Validated configuration
        base_environment: Environment to extend (defaults to os.environ)

    Returns:
        Complete environment for the child process
    """
    function = get_function_configuration(session, target.function_name, target.region)
    manager = TrustGrantManager(session, config.escalation_settings())
    credentials = manager.get_credentials(function.role_arn)

    return build_environment(
        credentials,
        function.region,
        function.environment,
        dict(os.environ) if base_environment is None else base_environment
    )


def report_revoke_failure(error: RevokeFailedError) -> None:
    """Tell the operator how to remove a grant that could not be revoked."""
    OutputHandler.error("Temporary Grant Not Revoked", error)
    OutputHandler.warning(
        "Manual Cleanup Required",
        f"Role '{error.role_name}' still trusts the current principal through statement "
        f"'{error.sid}'. Remove every statement whose Sid starts with '{error.sid_prefix}' from its "
        f"trust policy. The statement stops matching on its own after its DateLessThan condition."
    )
    if error.pending_error is not None:
        OutputHandler.error("Role Assumption Also Failed", error.pending_error)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for lambdaenv."""
    cli_args = parse_cli_args(argv)
    yaml_config = load_yaml_config(cli_args.config)

    final_config = setup_configuration(cli_args, yaml_config)
    setup_logging(final_config.verbose)
    logger.debug(f"Final config: {final_config.model_dump()}")

    try:
        target = resolve_function_target(final_config)
        session = create_session(final_config.profile, target.region)
        environment = get_env_variables(session, target, final_config)

    except RevokeFailedError as e:
        report_revoke_failure(e)
        logger.error(f"Failed to revoke temporary grant: {e}", exc_info=True)
        sys.exit(1)
    except TrustGrantError as e:
        OutputHandler.error("Role Escalation Error", e)
        logger.error(f"Role escalation failed: {e}", exc_info=True)
        sys.exit(1)
    except (FunctionLookupError, TerraformStateError, InvalidArnError) as e:
        OutputHandler.error("Function Lookup Error", e)
        logger.error(f"Could not determine Lambda function: {e}", exc_info=True)
        sys.exit(1)
    except ClientError as e:
        error_code = e.response['Error']['Code']
        OutputHandler.error(f"AWS API Error ({error_code})", e)
        logger.error(f"AWS API error: {e}", exc_info=True)
        sys.exit(1)
    except BotoCoreError as e:
        OutputHandler.error("AWS Error", e)
        logger.error(f"AWS error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(run_command(cli_args.command, environment))
