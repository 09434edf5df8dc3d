"""
Terraform State Discovery

Finds the Lambda functions managed by the Terraform configuration in a
directory so the function does not have to be named on the command line.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, List, Optional

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from ..constants import TERRAFORM_LAMBDA_RESOURCE_TYPE
from ..types import JsonDict, LambdaFunctionTarget
from ..utils import InvalidArnError, parse_arn

logger = logging.getLogger(__name__)

__all__ = [
    "TerraformStateError",
    "TerraformLambdaResource",
    "read_terraform_state",
    "find_lambda_resources",
    "select_lambda_resource",
    "get_function_from_terraform",
]


class TerraformStateError(Exception):
    """Raised when the Terraform state cannot be read or holds no usable function."""


@dataclass
class TerraformLambdaResource:
    """An aws_lambda_function resource found in the state."""
    address: str
    function_name: str
    arn: Optional[str] = None

    @property
    def region(self) -> Optional[str]:
        if not self.arn:
            return None
        try:
            return parse_arn(self.arn).region or None
        except InvalidArnError:
            return None

    def label(self) -> str:
        return f"[{self.address}] {self.function_name}"


def read_terraform_state(terraform_dir: str = ".") -> JsonDict:
    """
    Run `terraform show -json` and decode its output.

    Args:
        terraform_dir: Directory holding the Terraform configuration

    Returns:
        Decoded state

    Raises:
        TerraformStateError: If terraform is missing, fails, or prints invalid JSON
    """
    try:
        result = subprocess.run(
            ["terraform", "show", "-json"],
            cwd=terraform_dir,
            capture_output=True,
            text=True,
            check=True
        )
    except FileNotFoundError as e:
        raise TerraformStateError("terraform executable not found on PATH") from e
    except subprocess.CalledProcessError as e:
        raise TerraformStateError(
            f"`terraform show -json` failed with exit code {e.returncode}: {(e.stderr or '').strip()}"
        ) from e

    try:
        state = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise TerraformStateError(f"`terraform show -json` did not print valid JSON: {e}") from e
    if not isinstance(state, dict):
        raise TerraformStateError("`terraform show -json` did not print a JSON object")
    return state


def _collect_lambda_objects(node: Any, found: List[JsonDict]) -> None:
    if isinstance(node, list):
        for item in node:
            _collect_lambda_objects(item, found)
    elif isinstance(node, dict):
        if node.get("type") == TERRAFORM_LAMBDA_RESOURCE_TYPE:
            found.append(node)
        for value in node.values():
            _collect_lambda_objects(value, found)


def find_lambda_resources(state: JsonDict) -> List[TerraformLambdaResource]:
    """
    Find every Lambda function resource anywhere in a Terraform state.

    Resources inside child modules are found as well, since the whole
    document is searched rather than only values.root_module.resources.

    Args:
        state: Output of `terraform show -json`

    Returns:
        Resources in document order; objects without a function name are skipped
    """
    objects: List[JsonDict] = []
    _collect_lambda_objects(state, objects)

    resources: List[TerraformLambdaResource] = []
    for obj in objects:
        values = obj.get("values")
        if not isinstance(values, dict) or not values.get("function_name"):
            logger.debug(f"Skipping {TERRAFORM_LAMBDA_RESOURCE_TYPE} object without values: {obj.get('address')}")
            continue
        resources.append(TerraformLambdaResource(
            address=str(obj.get("address", values["function_name"])),
            function_name=str(values["function_name"]),
            arn=values.get("arn"),
        ))
    return resources


def select_lambda_resource(resources: List[TerraformLambdaResource]) -> TerraformLambdaResource:
    """
    Pick one resource, prompting when there is more than one.

    Raises:
        TerraformStateError: If there are no resources
    """
    if not resources:
        raise TerraformStateError("no functions are managed by Terraform")
    if len(resources) == 1:
        return resources[0]

    selected: TerraformLambdaResource = inquirer.select(
        message="Lambda function",
        choices=[Choice(value=resource, name=resource.label()) for resource in resources],
    ).execute()
    return selected


def get_function_from_terraform(terraform_dir: str = ".") -> LambdaFunctionTarget:
    """
    Determine the target function from the Terraform state in a directory.

    Args:
        terraform_dir: Directory holding the Terraform configuration

    Returns:
        LambdaFunctionTarget with the region taken from the resource ARN
    """
    state = read_terraform_state(terraform_dir)
    resource = select_lambda_resource(find_lambda_resources(state))
    logger.info(f"Using Lambda function {resource.label()} from Terraform state")
    return LambdaFunctionTarget(function_name=resource.function_name, region=resource.region)
