"""
响应数据模型访问函数的单元测试（示例响应来自 tests.config）。
"""

from __future__ import annotations

from web3dav.models import (
    challenge_expires_at,
    challenge_message,
    challenge_nonce,
    user_permissions,
    user_username,
    user_wallet_address,
    verify_token,
    verify_user,
)

from tests.config import SAMPLE_CHALLENGE, SAMPLE_VERIFY, TEST_ADDRESS


def test_challenge_fields() -> None:
    assert challenge_message(SAMPLE_CHALLENGE) == "abc123"
    assert challenge_nonce(SAMPLE_CHALLENGE) == "n-1"
    assert challenge_expires_at(SAMPLE_CHALLENGE) == "2026-10-18T00:05:00Z"
    assert challenge_nonce({"message": "m"}) is None


def test_verify_fields() -> None:
    assert verify_token(SAMPLE_VERIFY) == "T"
    user = verify_user(SAMPLE_VERIFY)
    assert user_username(user) == "alice"
    assert user_wallet_address(user) == TEST_ADDRESS.lower()
    assert user_permissions(user) == ["read", "create", "update", "delete"]


def test_user_missing_or_not_a_dict() -> None:
    """user 缺失或为非对象（如字符串）时访问函数返回空值。"""
    assert verify_user({"token": "T"}) is None
    assert user_username(None) is None
    assert user_username("alice") is None
    assert user_wallet_address(None) is None
    assert user_permissions(None) == []
    assert user_permissions({"username": "bob"}) == []
