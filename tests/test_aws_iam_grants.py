"""
Tests for lambdaenv.aws.iam.grants module.

Tests for temporary grant creation and removal.
"""

import pytest
from unittest.mock import patch
from lambdaenv.aws.iam import is_temporary_grant, make_grant, strip_temporary_grants
from lambdaenv.aws.iam.grants import generate_sid_suffix
from lambdaenv.constants import SID_ALPHABET, SID_PREFIX, SID_SUFFIX_LENGTH


CALLER_ARN = "arn:aws:iam::111111111111:role/caller"


class TestGenerateSidSuffix:
    """Test generate_sid_suffix function."""

    def test_length_and_alphabet(self) -> None:
        """Test the suffix is alphanumeric with the fixed length."""
        suffix = generate_sid_suffix()
        assert len(suffix) == SID_SUFFIX_LENGTH
        assert suffix.isalnum()
        assert set(suffix) <= set(SID_ALPHABET)

    def test_alphabet_has_62_characters(self) -> None:
        """Test the alphabet is letters and digits only."""
        assert len(set(SID_ALPHABET)) == 62


class TestMakeGrant:
    """Test make_grant function."""

    def test_statement_shape(self) -> None:
        """Test the rendered statement allows the caller to assume the role."""
        grant = make_grant(CALLER_ARN, 600, now=1_700_000_000)
        statement = grant.to_statement()

        assert statement["Sid"] == grant.sid
        assert statement["Effect"] == "Allow"
        assert statement["Principal"] == {"AWS": CALLER_ARN}
        assert statement["Action"] == "sts:AssumeRole"
        assert statement["Condition"] == {"DateLessThan": {"aws:EpochTime": 1_700_000_600}}

    def test_expiry_rounds_current_time(self) -> None:
        """Test the deadline is whole epoch seconds."""
        grant = make_grant(CALLER_ARN, 10, now=100.6)
        assert grant.expires_at == 111

    def test_sid_prefix(self) -> None:
        """Test the Sid carries the fixed prefix and an alphanumeric suffix."""
        grant = make_grant(CALLER_ARN, 600)
        assert grant.sid.startswith(SID_PREFIX)
        assert len(grant.sid) == len(SID_PREFIX) + SID_SUFFIX_LENGTH
        assert grant.sid.isalnum()

    def test_custom_prefix(self) -> None:
        """Test a custom Sid prefix is honoured."""
        grant = make_grant(CALLER_ARN, 600, prefix="OTHERTEMP")
        assert grant.sid.startswith("OTHERTEMP")

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_raises(self, ttl: int) -> None:
        """Test the TTL must be positive."""
        with pytest.raises(ValueError):
            make_grant(CALLER_ARN, ttl)

    def test_empty_caller_raises(self) -> None:
        """Test the caller ARN is required."""
        with pytest.raises(ValueError):
            make_grant("", 600)

    def test_never_collides_with_existing_sids(self) -> None:
        """Test 10,000 generated Sids never reuse a Sid already in the policy."""
        existing = {"X", "AllowLambda", SID_PREFIX + "existing01"}
        existing.update(f"{SID_PREFIX}{generate_sid_suffix()}" for _ in range(50))

        for _ in range(10_000):
            grant = make_grant(CALLER_ARN, 600, existing_sids=existing)
            assert grant.sid.startswith(SID_PREFIX)
            assert grant.sid not in existing

    def test_regenerates_on_collision(self) -> None:
        """Test a colliding Sid is drawn again."""
        with patch(
            "lambdaenv.aws.iam.grants.generate_sid_suffix",
            side_effect=["aaaaaaaaaa", "bbbbbbbbbb"]
        ):
            grant = make_grant(CALLER_ARN, 600, existing_sids={SID_PREFIX + "aaaaaaaaaa"})

        assert grant.sid == SID_PREFIX + "bbbbbbbbbb"


class TestIsTemporaryGrant:
    """Test is_temporary_grant function."""

    def test_prefixed_sid(self) -> None:
        """Test a Sid starting with the prefix matches."""
        assert is_temporary_grant({"Sid": SID_PREFIX + "abc"}) is True

    def test_no_sid(self) -> None:
        """Test statements without a Sid never match."""
        assert is_temporary_grant({"Effect": "Allow"}) is False

    def test_prefix_inside_sid(self) -> None:
        """Test the prefix must be at the start of the Sid."""
        assert is_temporary_grant({"Sid": "X" + SID_PREFIX}) is False

    def test_shorter_common_substring(self) -> None:
        """Test a Sid sharing only part of the prefix does not match."""
        assert is_temporary_grant({"Sid": "SETLAMBDAENV"}) is False
        assert is_temporary_grant({"Sid": "SETLAMBDAENVTEM1"}) is False

    def test_non_string_sid(self) -> None:
        """Test a non-string Sid does not match."""
        assert is_temporary_grant({"Sid": 42}) is False


class TestStripTemporaryGrants:
    """Test strip_temporary_grants function."""

    def test_removes_only_prefixed_statements(self) -> None:
        """Test exactly the prefixed statements are removed, order preserved."""
        keep_first = {"Sid": "SETLAMBDA", "Effect": "Allow"}
        keep_second = {"Effect": "Allow", "Principal": {"Service": "lambda.amazonaws.com"}}
        keep_third = {"Sid": "TEMPSETLAMBDAENVTEMP", "Effect": "Deny"}
        drop_first = {"Sid": SID_PREFIX + "aaaaaaaaaa", "Effect": "Allow"}
        drop_second = {"Sid": SID_PREFIX, "Effect": "Allow"}

        result = strip_temporary_grants([keep_first, drop_first, keep_second, drop_second, keep_third])

        assert result == [keep_first, keep_second, keep_third]

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_augment_then_strip_restores_original(self, count: int) -> None:
        """Test appending a grant and stripping it restores the statements."""
        original = [{"Sid": f"S{i}", "Effect": "Allow", "Action": "sts:AssumeRole"} for i in range(count)]
        grant = make_grant(CALLER_ARN, 600)

        augmented = [*original, grant.to_statement()]
        restored = strip_temporary_grants(augmented)

        assert restored == original

    def test_input_list_not_modified(self) -> None:
        """Test the input list is left untouched."""
        statements = [{"Sid": SID_PREFIX + "x"}]
        strip_temporary_grants(statements)
        assert statements == [{"Sid": SID_PREFIX + "x"}]
