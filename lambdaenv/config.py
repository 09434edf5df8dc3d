from typing import Optional
from pydantic import BaseModel, Field, model_validator

from .constants import (
    DEFAULT_GRANT_TTL_SECONDS,
    DEFAULT_INITIAL_BACKOFF_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF_SECONDS,
    DEFAULT_MAX_ELAPSED_SECONDS,
    DEFAULT_SESSION_NAME,
    SID_PREFIX,
)


class EscalationSettings(BaseModel):
    session_name: str = Field(default=DEFAULT_SESSION_NAME, min_length=2, max_length=64)
    # Seconds before an unrevoked grant stops matching
    grant_ttl_seconds: int = Field(default=DEFAULT_GRANT_TTL_SECONDS, gt=0)
    sid_prefix: str = Field(default=SID_PREFIX, pattern=r"^[A-Za-z0-9]+$")
    # Retry budget for sts:AssumeRole while the trust policy propagates
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    max_elapsed_seconds: float = Field(default=DEFAULT_MAX_ELAPSED_SECONDS, gt=0)
    initial_backoff_seconds: float = Field(default=DEFAULT_INITIAL_BACKOFF_SECONDS, gt=0)
    max_backoff_seconds: float = Field(default=DEFAULT_MAX_BACKOFF_SECONDS, gt=0)

    @model_validator(mode="after")
    def check_backoff_range(self) -> "EscalationSettings":
        if self.initial_backoff_seconds > self.max_backoff_seconds:
            raise ValueError(
                f"initial_backoff_seconds ({self.initial_backoff_seconds}) must not exceed "
                f"max_backoff_seconds ({self.max_backoff_seconds})"
            )
        return self


class LambdaEnvConfig(BaseModel):
    # Function name or ARN; discovered from Terraform state when unset
    function: Optional[str] = None
    region: Optional[str] = None
    profile: Optional[str] = None
    # Directory `terraform show -json` runs in
    terraform_dir: str = "."
    session_name: str = DEFAULT_SESSION_NAME
    grant_ttl_seconds: int = DEFAULT_GRANT_TTL_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_elapsed_seconds: float = DEFAULT_MAX_ELAPSED_SECONDS
    initial_backoff_seconds: float = DEFAULT_INITIAL_BACKOFF_SECONDS
    max_backoff_seconds: float = DEFAULT_MAX_BACKOFF_SECONDS
    verbose: bool = False

    def escalation_settings(self) -> EscalationSettings:
        """Build the settings consumed by the trust grant manager (validates ranges)."""
        return EscalationSettings(
            session_name=self.session_name,
            grant_ttl_seconds=self.grant_ttl_seconds,
            max_attempts=self.max_attempts,
            max_elapsed_seconds=self.max_elapsed_seconds,
            initial_backoff_seconds=self.initial_backoff_seconds,
            max_backoff_seconds=self.max_backoff_seconds,
        )
