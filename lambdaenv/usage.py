import argparse
import yaml
from typing import Any, Dict, List, Optional
from .config import LambdaEnvConfig
from .constants import DEFAULT_CONFIG_PATH


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments for the lambdaenv tool.

    Everything after the tool's own options is the command to run.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="lambdaenv",
        description="Run <command> with a Lambda function's environment variables and execution role credentials",
        usage="%(prog)s [-f FUNCTION] [options] [--] command ..."
    )

    parser.add_argument(
        '-f', '--function',
        dest='function',
        type=str,
        help='The function name or ARN (default: discovered from Terraform state)'
    )
    parser.add_argument(
        '--region',
        dest='region',
        type=str,
        help='Region of the function when given by name'
    )
    parser.add_argument(
        '--profile',
        dest='profile',
        type=str,
        help='AWS profile to escalate from'
    )
    parser.add_argument(
        '--config',
        default=DEFAULT_CONFIG_PATH,
        type=str,
        help=f'Path to config YAML (default {DEFAULT_CONFIG_PATH}, optional)'
    )
    parser.add_argument(
        '--terraform-dir',
        dest='terraform_dir',
        type=str,
        help='Directory to run `terraform show -json` in (default .)'
    )

    # Escalation tuning (override YAML if provided)
    parser.add_argument(
        '--session-name',
        dest='session_name',
        type=str,
        help='Role session name used when assuming the execution role'
    )
    parser.add_argument(
        '--grant-ttl',
        dest='grant_ttl_seconds',
        type=int,
        help='Seconds before the temporary trust grant expires on its own (default 600)'
    )
    parser.add_argument(
        '--max-attempts',
        dest='max_attempts',
        type=int,
        help='Maximum sts:AssumeRole attempts while the trust policy propagates (default 20)'
    )
    parser.add_argument(
        '--max-elapsed',
        dest='max_elapsed_seconds',
        type=float,
        help='Maximum seconds to keep retrying sts:AssumeRole (default 120)'
    )
    parser.add_argument(
        '-v', '--verbose',
        dest='verbose',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Enable debug logging'
    )

    parser.add_argument(
        'command',
        nargs=argparse.REMAINDER,
        help='Command to run'
    )

    args = parser.parse_args(argv)
    if args.command and args.command[0] == '--':
        args.command = args.command[1:]
    if not args.command:
        parser.error('a command to run is required')
    return args


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> LambdaEnvConfig:
    """
    Merge YAML configuration with CLI arguments and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        cli_args: Parsed command line arguments

    Returns:
        Validated LambdaEnvConfig object

    Raises:
        ValueError: If configuration validation fails
        TypeError: If configuration has type errors
    """
    # Start with YAML
    merged = yaml_config.copy()

    # Apply CLI overrides (only if CLI provided them)
    cli_dict = {
        k: v for k, v in vars(cli_args).items()
        if k in LambdaEnvConfig.model_fields and v is not None
    }
    merged.update(cli_dict)

    # Validate and return final config (will raise if required fields missing or wrong types)
    return LambdaEnvConfig(**merged)
