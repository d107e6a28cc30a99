"""Tests for relpub.core.errors module."""

from relpub.core.errors import ErrorCode


class TestErrorCodeValues:
    def test_ok_is_zero(self) -> None:
        assert ErrorCode.OK == 0

    def test_failure_codes_are_stable(self) -> None:
        assert ErrorCode.ENV_ERROR == 2
        assert ErrorCode.BUILD_ERROR == 3
        assert ErrorCode.NETWORK_ERROR == 4
        assert ErrorCode.AUTH_ERROR == 5

    def test_no_code_collides_with_crash_exit(self) -> None:
        assert 1 not in {int(code) for code in ErrorCode}
