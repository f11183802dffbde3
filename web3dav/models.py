"""
web3dav 服务端响应数据模型（与服务端 JSON 一致）。

- 挑战：GET /api/auth/challenge → {nonce, message, expires_at}
- 验证：POST /api/auth/verify → {token, expires_at, user: {username, wallet_address, permissions}}
- 健康检查：GET /health → {status, uptime, version}
- 错误：{error: 错误码, message: 说明}
"""

from typing import Any

# ChallengeResponse：message 为需要签名的原文
ChallengeResponse = dict[str, Any]

# VerifyResponse：token 为后续请求使用的 Bearer token，user 可选
VerifyResponse = dict[str, Any]

# UserInfo：verify 响应中的 user
UserInfo = dict[str, Any]

# HealthResponse：/health 响应
HealthResponse = dict[str, Any]


def challenge_message(challenge: ChallengeResponse) -> str:
    """需要钱包签名的消息原文。"""
    return challenge["message"]


def challenge_nonce(challenge: ChallengeResponse) -> str | None:
    return challenge.get("nonce")


def challenge_expires_at(challenge: ChallengeResponse) -> Any:
    """挑战过期时间（服务端原样返回，客户端不做解析）。"""
    return challenge.get("expires_at")


def verify_token(result: VerifyResponse) -> str:
    """验证成功后返回的 Bearer token。"""
    return result["token"]


def verify_user(result: VerifyResponse) -> UserInfo | None:
    return result.get("user")


def user_username(user: UserInfo | None) -> str | None:
    if not isinstance(user, dict):
        return None
    return user.get("username")


def user_wallet_address(user: UserInfo | None) -> str | None:
    if not isinstance(user, dict):
        return None
    return user.get("wallet_address")


def user_permissions(user: UserInfo | None) -> list[str]:
    """权限列表，如 ["read", "create", "update", "delete"]；无则为空列表。"""
    if not isinstance(user, dict):
        return []
    return list(user.get("permissions") or [])
