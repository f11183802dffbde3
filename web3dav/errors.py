"""
web3dav 错误类型。

- 连接钱包前：ProviderUnavailableError
- 认证前：NotConnectedError
- 文件操作前：NotAuthenticatedError
- 挑战 / 验证被服务端拒绝：ChallengeFailedError / VerificationFailedError（消息取自服务端 JSON 的 message）
- 文件操作返回非 2xx：RequestFailedError（消息仅由状态码与状态文本组成，不解析响应体）
"""

from __future__ import annotations


class Web3DAVError(Exception):
    """所有 web3dav 错误的基类，str(err) 即 message。"""

    default_message = "web3dav error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ProviderUnavailableError(Web3DAVError):
    default_message = "Wallet provider is not available"


class NotConnectedError(Web3DAVError):
    default_message = "Wallet not connected"


class NotAuthenticatedError(Web3DAVError):
    default_message = "Not authenticated"


class ServerRejectedError(Web3DAVError):
    """认证接口返回非 2xx。status_code 为 HTTP 状态码，code 为服务端 JSON 的 error 字段（可能为 None）。"""

    def __init__(self, message: str | None = None, *, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ChallengeFailedError(ServerRejectedError):
    default_message = "Failed to get challenge"


class VerificationFailedError(ServerRejectedError):
    default_message = "Verification failed"


class RequestFailedError(Web3DAVError):
    """带 Bearer 的请求返回非 2xx，消息形如 "HTTP 404: Not Found"。"""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}")
