"""
钱包抽象与本地私钥实现。

客户端只依赖两个能力：
- WalletProvider.request_accounts() / get_signer()
- Signer.get_address() / sign_message(message)

浏览器钱包（如 MetaMask）之外，提供基于 eth-account 的 LocalWalletProvider，
按 EIP-191 personal_sign 签名（服务端按 "\\x19Ethereum Signed Message:\\n" 前缀验签）。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from web3dav.errors import ProviderUnavailableError


@runtime_checkable
class Signer(Protocol):
    def get_address(self) -> str: ...

    def sign_message(self, message: str) -> str: ...


@runtime_checkable
class WalletProvider(Protocol):
    def request_accounts(self) -> list[str]: ...

    def get_signer(self) -> Signer: ...


class LocalSigner:
    """用本地 LocalAccount 签名，返回 0x 开头的 65 字节十六进制签名。"""

    def __init__(self, account: LocalAccount):
        self._account = account

    def get_address(self) -> str:
        return self._account.address

    def sign_message(self, message: str) -> str:
        signed = self._account.sign_message(encode_defunct(text=message))
        return "0x" + bytes(signed.signature).hex()


class LocalWalletProvider:
    """
    单账户本地钱包。

    :param private_key: 十六进制私钥（可带 0x 前缀）
    :raises ProviderUnavailableError: 私钥无效
    """

    def __init__(self, private_key: str):
        try:
            self._account: LocalAccount = Account.from_key(private_key)
        except Exception as e:
            raise ProviderUnavailableError(f"Invalid private key: {e}") from e

    @classmethod
    def from_key(cls, private_key: str) -> LocalWalletProvider:
        return cls(private_key)

    def request_accounts(self) -> list[str]:
        return [self._account.address]

    def get_signer(self) -> LocalSigner:
        return LocalSigner(self._account)
