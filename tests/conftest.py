"""
pytest 配置与共享 fixture。

单元测试用 httpx.MockTransport 模拟服务端（FakeServer），用 FakeProvider 模拟钱包，
签名结果确定可断言。URL、钱包与示例响应见 tests.config。
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from web3dav import Web3DAVClient

from tests.config import SAMPLE_CHALLENGE, SAMPLE_VERIFY, TEST_ADDRESS, W3DAV_BASE_URL


class FakeSigner:
    """签名为 sig(<message>)，并记录每次签名的原文。"""

    def __init__(self, address: str):
        self.address = address
        self.signed: list[str] = []

    def get_address(self) -> str:
        return self.address

    def sign_message(self, message: str) -> str:
        self.signed.append(message)
        return f"sig({message})"


class FakeProvider:
    def __init__(self, address: str = TEST_ADDRESS):
        self.signer = FakeSigner(address)
        self.accounts_requested = 0

    def request_accounts(self) -> list[str]:
        self.accounts_requested += 1
        return [self.signer.address]

    def get_signer(self) -> FakeSigner:
        return self.signer


def _response(status: int, body: Any) -> httpx.Response:
    if isinstance(body, (bytes, str)):
        return httpx.Response(status, content=body)
    return httpx.Response(status, json=body)


class FakeServer:
    """
    记录所有请求的假服务端。

    - challenge / verify：(状态码, JSON 或原始 body)
    - responses[(method, path)]：文件操作的 (状态码, body)，未配置时返回 default
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.challenge: tuple[int, Any] = (200, SAMPLE_CHALLENGE)
        self.verify: tuple[int, Any] = (200, SAMPLE_VERIFY)
        self.health: tuple[int, Any] = (200, {"status": "healthy", "uptime": 1, "version": "2.0.0"})
        self.responses: dict[tuple[str, str], tuple[int, Any]] = {}
        self.default: tuple[int, Any] = (200, b"")

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path
        if path == "/api/auth/challenge":
            return _response(*self.challenge)
        if path == "/api/auth/verify":
            return _response(*self.verify)
        if path == "/health":
            return _response(*self.health)
        return _response(*self.responses.get((request.method, path), self.default))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(server: FakeServer, provider: FakeProvider) -> Web3DAVClient:
    """已注入假钱包与假服务端、尚未连接的客户端。"""
    c = Web3DAVClient(W3DAV_BASE_URL, provider, transport=server.transport())
    yield c
    c.close()


@pytest.fixture
def authed_client(client: Web3DAVClient, server: FakeServer) -> Web3DAVClient:
    """已完成 connect_wallet + authenticate 的客户端；认证过程的请求已从 server.requests 清除。"""
    client.connect_wallet()
    client.authenticate()
    server.requests.clear()
    return client
