"""
Terraform Module

This module reads Terraform state to discover which Lambda function a
command should run as when none is given on the command line.

Modules:
- state: Runs `terraform show -json` and finds aws_lambda_function resources
"""

from .state import TerraformStateError, get_function_from_terraform

__all__ = [
    "TerraformStateError",
    "get_function_from_terraform",
]
