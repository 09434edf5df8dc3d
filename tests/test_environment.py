"""Tests for lambdaenv.environment module."""

import subprocess
import pytest
from unittest.mock import patch
from lambdaenv.environment import build_environment, credentials_environment, run_command
from lambdaenv.types import AssumedCredentials


CREDENTIALS = AssumedCredentials(
    access_key_id="FAKE_ACCESS_KEY_ID",
    secret_access_key="FAKE_SECRET_ACCESS_KEY",
    session_token="FAKE_SESSION_TOKEN"
)


class TestCredentialsEnvironment:
    """Test credentials_environment function."""

    def test_variables(self) -> None:
        """Test the AWS_* variables for credentials and region."""
        assert credentials_environment(CREDENTIALS, "eu-west-1") == {
            "AWS_ACCESS_KEY_ID": "FAKE_ACCESS_KEY_ID",
            "AWS_SECRET_ACCESS_KEY": "FAKE_SECRET_ACCESS_KEY",
            "AWS_SESSION_TOKEN": "FAKE_SESSION_TOKEN",
            "AWS_REGION": "eu-west-1",
            "AWS_DEFAULT_REGION": "eu-west-1",
        }


class TestBuildEnvironment:
    """Test build_environment function."""

    def test_credentials_override_base_environment(self) -> None:
        """Test credentials and region replace values from the parent environment."""
        base = {"PATH": "/usr/bin", "AWS_ACCESS_KEY_ID": "PARENT_KEY", "AWS_REGION": "us-east-1"}

        result = build_environment(CREDENTIALS, "eu-west-1", {}, base)

        assert result["PATH"] == "/usr/bin"
        assert result["AWS_ACCESS_KEY_ID"] == "FAKE_ACCESS_KEY_ID"
        assert result["AWS_REGION"] == "eu-west-1"

    def test_function_variables_override_everything(self) -> None:
        """Test function variables have the last word."""
        base = {"STAGE": "local"}
        function_variables = {"STAGE": "prod", "AWS_REGION": "ap-south-1"}

        result = build_environment(CREDENTIALS, "eu-west-1", function_variables, base)

        assert result["STAGE"] == "prod"
        assert result["AWS_REGION"] == "ap-south-1"
        assert result["AWS_SESSION_TOKEN"] == "FAKE_SESSION_TOKEN"

    def test_inputs_not_modified(self) -> None:
        """Test the base environment is copied."""
        base = {"PATH": "/usr/bin"}
        build_environment(CREDENTIALS, "eu-west-1", {"A": "1"}, base)
        assert base == {"PATH": "/usr/bin"}


class TestRunCommand:
    """Test run_command function."""

    def test_returns_exit_code(self) -> None:
        """Test the child's exit code is returned."""
        completed = subprocess.CompletedProcess(args=["make"], returncode=3)
        with patch("lambdaenv.environment.subprocess.run", return_value=completed) as mock_run:
            assert run_command(["make", "test"], {"A": "1"}) == 3

        mock_run.assert_called_once_with(["make", "test"], env={"A": "1"}, check=False)

    def test_command_not_found(self) -> None:
        """Test a missing program exits with 127."""
        with patch("lambdaenv.environment.subprocess.run", side_effect=FileNotFoundError):
            assert run_command(["no-such-program"], {}) == 127

    def test_empty_command(self) -> None:
        """Test a command is required."""
        with pytest.raises(ValueError):
            run_command([], {})
