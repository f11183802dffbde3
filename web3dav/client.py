"""
WebDAV Web3 Python API 客户端。

流程：connect_wallet（连接钱包）→ authenticate（挑战签名换取 token）→ 文件操作
（list_directory / upload_file / download_file / delete_file / create_directory）。

调用方需自行串行化 authenticate 与文件操作：客户端不加锁，并发时 token 的读写存在竞态。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from web3dav.errors import (
    ChallengeFailedError,
    NotAuthenticatedError,
    NotConnectedError,
    ProviderUnavailableError,
    RequestFailedError,
    ServerRejectedError,
    VerificationFailedError,
)
from web3dav.models import ChallengeResponse, HealthResponse, VerifyResponse, challenge_message, verify_token
from web3dav.wallet import Signer, WalletProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:6065"

CHALLENGE_PATH = "/api/auth/challenge"
VERIFY_PATH = "/api/auth/verify"
HEALTH_PATH = "/health"

_REDACTED_HEADERS = ("authorization", "cookie")


def _redacted_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """日志用：隐藏 Authorization / Cookie 的值。"""
    return {k: ("[REDACTED]" if k.lower() in _REDACTED_HEADERS else v) for k, v in headers.items()}


def _raise_server_error(r: httpx.Response, error_cls: type[ServerRejectedError]) -> None:
    """认证接口的错误：优先使用响应 JSON 的 message，否则用 error_cls 的默认消息。"""
    try:
        data = r.json()
    except ValueError:
        data = None
    message = None
    code = None
    if isinstance(data, dict):
        message = data.get("message") or None
        code = data.get("error")
    raise error_cls(message, status_code=r.status_code, code=code)


class Web3DAVClient:
    """
    WebDAV Web3 服务器 API 客户端。

    认证方式：钱包对服务端下发的挑战消息签名，验证通过后得到 Bearer token。
    测试示例： base_url="http://localhost:6065", provider=LocalWalletProvider(私钥)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        provider: WalletProvider | None = None,
        *,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        :param base_url: 服务器根地址，如 http://localhost:6065
        :param provider: 钱包 provider（需提供 request_accounts / get_signer）
        :param timeout: 请求超时秒数
        :param verify: 是否验证 HTTPS 证书
        :param transport: 自定义 httpx transport（测试时可传 httpx.MockTransport）
        """
        self._base_url = base_url.rstrip("/")
        self.provider = provider
        self.timeout = timeout
        self.verify = verify
        self.transport = transport
        self.wallet_address: str | None = None
        self.signer: Signer | None = None
        self.token: str | None = None
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_connected(self) -> bool:
        return self.wallet_address is not None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=self.timeout,
                verify=self.verify,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """关闭底层 HTTP 客户端（钱包地址与 token 保留）。"""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> Web3DAVClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------- 钱包与认证 -------------------------

    def connect_wallet(self) -> str:
        """
        连接钱包：请求账户授权、获取 signer 并解析当前地址。

        :return: 钱包地址
        :raises ProviderUnavailableError: 未提供钱包 provider
        """
        if self.provider is None:
            raise ProviderUnavailableError()
        self.provider.request_accounts()
        signer = self.provider.get_signer()
        address = signer.get_address()
        self.signer = signer
        self.wallet_address = address
        logger.info("wallet connected: %s", address)
        return address

    def authenticate(self) -> VerifyResponse:
        """
        认证：获取挑战 → 对挑战 message 签名 → 提交验证，保存返回的 token。

        :return: 验证接口的完整响应（含 token，可能含 user）
        :raises NotConnectedError: 尚未 connect_wallet
        :raises ChallengeFailedError: 获取挑战失败
        :raises VerificationFailedError: 验证失败
        """
        if not self.wallet_address or self.signer is None:
            raise NotConnectedError()
        challenge = self.get_challenge(self.wallet_address)
        signature = self.signer.sign_message(challenge_message(challenge))
        result = self.verify_signature(self.wallet_address, signature)
        if not isinstance(result, dict) or not result.get("token"):
            raise VerificationFailedError("Verification response has no token")
        self.token = verify_token(result)
        logger.info("authenticated: %s", self.wallet_address)
        return result

    def get_challenge(self, address: str) -> ChallengeResponse:
        """
        GET /api/auth/challenge?address=...（无需认证）。

        :return: 含 message（待签名原文），服务端还会返回 nonce、expires_at
        """
        url = f"{self._base_url}{CHALLENGE_PATH}"
        logger.debug("HTTP GET %s address=%s", url, address)
        r = self._get_client().get(url, params={"address": address})
        if not r.is_success:
            _raise_server_error(r, ChallengeFailedError)
        return r.json()

    def verify_signature(self, address: str, signature: str) -> VerifyResponse:
        """
        POST /api/auth/verify，JSON 体 {address, signature}（无需认证）。

        :return: 含 token，可能含 user、expires_at
        """
        url = f"{self._base_url}{VERIFY_PATH}"
        logger.debug("HTTP POST %s address=%s", url, address)
        r = self._get_client().post(
            url,
            json={"address": address, "signature": signature},
            headers={"Content-Type": "application/json"},
        )
        if not r.is_success:
            _raise_server_error(r, VerificationFailedError)
        return r.json()

    def health(self) -> HealthResponse:
        """GET /health（无需认证），返回 {status, uptime, version}。"""
        url = f"{self._base_url}{HEALTH_PATH}"
        r = self._get_client().get(url)
        if not r.is_success:
            raise RequestFailedError(r.status_code, r.reason_phrase)
        return r.json()

    # ------------------------- 文件操作（需要 token） -------------------------

    def list_directory(self, path: str = "/") -> httpx.Response:
        """PROPFIND 列目录（Depth: 1）。返回原始响应，multistatus XML 由调用方自行解析。"""
        return self.request("PROPFIND", path, None, {"Depth": "1"})

    def upload_file(self, path: str, content: bytes | str) -> httpx.Response:
        """
        PUT 上传文件。

        不设置 Content-Type，服务端如何识别内容类型由调用方负责。
        """
        return self.request("PUT", path, content)

    def download_file(self, path: str) -> str:
        """GET 下载文件，始终按文本解码返回（二进制文件可能被错误解码）。"""
        r = self.request("GET", path)
        return r.text

    def delete_file(self, path: str) -> httpx.Response:
        return self.request("DELETE", path)

    def create_directory(self, path: str) -> httpx.Response:
        """MKCOL 创建目录。"""
        return self.request("MKCOL", path)

    def request(
        self,
        method: str,
        path: str,
        body: bytes | str | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """
        发送带 Bearer token 的请求，所有文件操作都经过这里。

        :param method: HTTP 方法（含 WebDAV 的 PROPFIND / MKCOL）
        :param path: 以 / 开头的路径，直接拼在 base_url 之后
        :param body: 请求体
        :param extra_headers: 额外请求头；与 Authorization 同名时覆盖之
        :return: 未读取的原始响应
        :raises NotAuthenticatedError: 尚未认证（不会发出请求）
        :raises RequestFailedError: 非 2xx，消息为 "HTTP {状态码}: {状态文本}"
        """
        if not self.token:
            raise NotAuthenticatedError()
        headers = httpx.Headers({"Authorization": f"Bearer {self.token}"})
        headers.update(extra_headers or {})
        url = f"{self._base_url}{path}"
        logger.debug("HTTP %s %s headers=%s", method, url, _redacted_headers(headers))
        r = self._get_client().request(method, url, content=body, headers=headers)
        logger.debug("HTTP %s %s -> %s", method, url, r.status_code)
        if not r.is_success:
            raise RequestFailedError(r.status_code, r.reason_phrase)
        return r
