"""
Constants module for trust grant and environment naming.

This module contains the fixed identifiers used throughout the lambdaenv codebase.
"""

import string

# Temporary trust grant statements
# Every statement injected into a trust policy carries a Sid starting with this prefix.
# Reference: https://docs.aws.amazon.com/IAM/latest/UserGuide/reference_policies_elements_sid.html
SID_PREFIX = "SETLAMBDAENVTEMP"
SID_SUFFIX_LENGTH = 10
# Sids only allow ASCII letters and digits
SID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

ASSUME_ROLE_ACTION = "sts:AssumeRole"
EPOCH_TIME_CONDITION_KEY = "aws:EpochTime"

# Escalation defaults
DEFAULT_SESSION_NAME = "set-lambda-env-vars"
DEFAULT_GRANT_TTL_SECONDS = 10 * 60
DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_MAX_ELAPSED_SECONDS = 120.0
DEFAULT_INITIAL_BACKOFF_SECONDS = 1.0
DEFAULT_MAX_BACKOFF_SECONDS = 8.0

# Error codes returned by sts:AssumeRole while a trust policy change propagates
# or while the API is throttling us. Anything else fails immediately.
RETRYABLE_ASSUME_ROLE_ERROR_CODES = frozenset({
    "AccessDenied",
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
})

# Environment variable names handed to the child process
ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN = "AWS_SESSION_TOKEN"
ENV_REGION = "AWS_REGION"
ENV_DEFAULT_REGION = "AWS_DEFAULT_REGION"

# Terraform state discovery
TERRAFORM_LAMBDA_RESOURCE_TYPE = "aws_lambda_function"

DEFAULT_CONFIG_PATH = ".lambdaenv.yaml"
