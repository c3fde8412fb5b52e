from __future__ import annotations

from cci.core.errors import ErrorCode


def test_codes_are_stable() -> None:
    assert [int(code) for code in ErrorCode] == [0, 1, 2, 3, 4, 5, 6, 7]


def test_str() -> None:
    assert str(ErrorCode.DRIFT_ERROR) == "drift error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.BUILD_ERROR.is_success
