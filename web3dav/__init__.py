"""WebDAV Web3 Python API 客户端：钱包签名认证 + WebDAV 文件操作。"""

from web3dav.client import DEFAULT_BASE_URL, Web3DAVClient
from web3dav.errors import (
    ChallengeFailedError,
    NotAuthenticatedError,
    NotConnectedError,
    ProviderUnavailableError,
    RequestFailedError,
    ServerRejectedError,
    VerificationFailedError,
    Web3DAVError,
)
from web3dav.models import (
    ChallengeResponse,
    VerifyResponse,
    challenge_message,
    user_permissions,
    user_username,
    user_wallet_address,
    verify_token,
    verify_user,
)
from web3dav.wallet import LocalSigner, LocalWalletProvider, Signer, WalletProvider

__all__ = [
    "DEFAULT_BASE_URL",
    "Web3DAVClient",
    "Web3DAVError",
    "ProviderUnavailableError",
    "NotConnectedError",
    "NotAuthenticatedError",
    "ServerRejectedError",
    "ChallengeFailedError",
    "VerificationFailedError",
    "RequestFailedError",
    "ChallengeResponse",
    "VerifyResponse",
    "challenge_message",
    "verify_token",
    "verify_user",
    "user_username",
    "user_wallet_address",
    "user_permissions",
    "WalletProvider",
    "Signer",
    "LocalWalletProvider",
    "LocalSigner",
]
