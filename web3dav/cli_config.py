"""
CLI 配置：本地保存/读取 base_url 与钱包私钥。

配置文件含明文私钥：目录权限 0700、文件权限 0600；读取时若发现组或其他用户可读，会记录警告。
"""

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PRIVATE_FILE_MODE = 0o600
PRIVATE_DIR_MODE = 0o700


def _config_dir() -> Path:
    """配置目录：~/.config/web3dav（所有平台统一）。"""
    return Path.home() / ".config" / "web3dav"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def _is_exposed(p: Path) -> bool:
    """组或其他用户对该文件有任何权限。"""
    return bool(stat.S_IMODE(p.stat().st_mode) & 0o077)


def load_config() -> dict[str, Any] | None:
    """读取本地配置；不存在或无效则返回 None。"""
    p = _config_path()
    if not p.exists():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict) or "base_url" not in data:
        return None
    if data.get("private_key") and _is_exposed(p):
        logger.warning("%s holds a private key but is readable by other users; run chmod 600 on it", p)
    return data


def save_config(base_url: str, private_key: str | None = None) -> None:
    """保存配置到本地；写入后将文件权限收紧为 0600。"""
    p = _config_path()
    p.parent.mkdir(mode=PRIVATE_DIR_MODE, parents=True, exist_ok=True)
    data: dict[str, Any] = {"base_url": base_url.rstrip("/")}
    if private_key is not None:
        data["private_key"] = private_key
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    os.chmod(p, PRIVATE_FILE_MODE)


def clear_config() -> bool:
    """清除本地配置；存在则删除并返回 True。"""
    p = _config_path()
    if p.exists():
        p.unlink()
        return True
    return False
