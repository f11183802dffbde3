"""
真实服务器集成测试：认证 → mkdir → 上传 → 列目录 → 下载 → 删除。

服务器与钱包来自 tests.config（W3DAV_TEST_BASE_URL / W3DAV_TEST_PRIVATE_KEY）；
服务器不可达或钱包未注册时跳过整个模块。
"""

from __future__ import annotations

import time

import httpx
import pytest

from web3dav import LocalWalletProvider, RequestFailedError, Web3DAVClient, Web3DAVError

from tests.config import W3DAV_TEST_BASE_URL, W3DAV_TEST_PRIVATE_KEY

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def live_client() -> Web3DAVClient:
    """已认证的真实客户端；服务器不可用时跳过。"""
    client = Web3DAVClient(W3DAV_TEST_BASE_URL, LocalWalletProvider(W3DAV_TEST_PRIVATE_KEY), timeout=10.0)
    try:
        client.health()
        client.connect_wallet()
        client.authenticate()
    except (httpx.HTTPError, Web3DAVError) as e:
        client.close()
        pytest.skip(f"web3dav 测试服务器不可用 ({W3DAV_TEST_BASE_URL}): {e}")
    yield client
    client.close()


@pytest.fixture(scope="module")
def work_dir(live_client: Web3DAVClient) -> str:
    """本次测试专用目录，结束后删除。"""
    path = f"/pytest-{int(time.time())}"
    live_client.create_directory(path)
    yield path
    try:
        live_client.delete_file(path)
    except RequestFailedError:
        pass


class TestFileLifecycle:
    def test_upload_list_download_delete(self, live_client: Web3DAVClient, work_dir: str) -> None:
        remote = f"{work_dir}/hello.txt"
        live_client.upload_file(remote, "Hello, Web3!")

        listing = live_client.list_directory(f"{work_dir}/")
        assert listing.status_code == 207
        assert "hello.txt" in listing.text

        assert live_client.download_file(remote) == "Hello, Web3!"

        live_client.delete_file(remote)
        with pytest.raises(RequestFailedError) as exc:
            live_client.download_file(remote)
        assert exc.value.status_code == 404

    def test_invalid_token_rejected(self, live_client: Web3DAVClient) -> None:
        """篡改 token 后文件操作返回 401。"""
        other = Web3DAVClient(W3DAV_TEST_BASE_URL, timeout=10.0)
        other.token = "invalid"
        with other, pytest.raises(RequestFailedError) as exc:
            other.list_directory()
        assert exc.value.status_code == 401
