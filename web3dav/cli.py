"""
w3dav CLI：保存 base_url 与钱包私钥到本地，每条命令先钱包签名认证再执行。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Optional
from urllib.parse import urlparse

import typer

from web3dav import DEFAULT_BASE_URL, LocalWalletProvider, Web3DAVClient, Web3DAVError
from web3dav.cli_config import clear_config, load_config, save_config
from web3dav.models import user_permissions, user_username, verify_user

PRIVATE_KEY_ENVVAR = "W3DAV_PRIVATE_KEY"

app = typer.Typer(
    name="w3dav",
    help="WebDAV Web3 CLI. Sign in with a wallet key and manage remote files.",
)

# 可选参数：覆盖保存的 base_url
_base_url_option: type = Annotated[
    Optional[str],
    typer.Option("--base-url", "-b", help=f"Override saved base URL (default: {DEFAULT_BASE_URL})"),
]

# 可选参数：覆盖保存的私钥，也可用环境变量
_private_key_option: type = Annotated[
    Optional[str],
    typer.Option("--private-key", "-k", envvar=PRIVATE_KEY_ENVVAR, help="Wallet private key (hex)"),
]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests to stderr")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_path_or_url(path_or_url: str) -> tuple[str, str | None]:
    """
    解析「路径」或「完整链接」，兼容用户直接粘贴浏览器地址。
    返回 (path, base_url_override)，path 总以 / 开头。
    - 若输入为 http(s)://host[:port]/path → path 为 /path，base_url 为 scheme://netloc
    - 否则视为路径，补齐前导 /
    """
    raw = (path_or_url or "").strip()
    if not raw:
        return "/", None
    parsed = urlparse(raw)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        base = f"{parsed.scheme}://{parsed.netloc}"
        return parsed.path or "/", base
    return raw if raw.startswith("/") else f"/{raw}", None


def _get_client(base_url: str | None, private_key: str | None) -> Web3DAVClient:
    cfg = load_config() or {}
    url = base_url or cfg.get("base_url") or DEFAULT_BASE_URL
    key = private_key or cfg.get("private_key")
    provider = LocalWalletProvider(key) if key else None
    return Web3DAVClient(base_url=url, provider=provider, timeout=30.0)


def _require_client(base_url: str | None, private_key: str | None) -> Web3DAVClient:
    try:
        client = _get_client(base_url, private_key)
    except Web3DAVError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    if client.provider is None:
        typer.echo(f"error: no private key. run 'w3dav login', pass --private-key or set {PRIVATE_KEY_ENVVAR}", err=True)
        raise typer.Exit(1)
    return client


def _sign_in(client: Web3DAVClient) -> dict:
    client.connect_wallet()
    return client.authenticate()


# ------------------------- login / logout / auth -------------------------


@app.command("login", help="Save base URL and wallet key to local config")
def login(
    base_url: Annotated[Optional[str], typer.Option("--base-url", "-b", help="Server base URL")] = None,
    private_key: Annotated[Optional[str], typer.Option("--private-key", "-k", help="Wallet private key (unsafe in shell)")] = None,
) -> None:
    base_url = base_url or input(f"Base URL [{DEFAULT_BASE_URL}]: ").strip() or DEFAULT_BASE_URL
    if private_key is None:
        private_key = typer.prompt("Private key", hide_input=True, default="", show_default=False) or None
    if private_key:
        try:
            LocalWalletProvider(private_key)
        except Web3DAVError as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(1)
    save_config(base_url, private_key)
    typer.echo("Saved.")


@app.command("logout", help="Clear saved config")
def logout() -> None:
    if clear_config():
        typer.echo("Cleared.")
    else:
        typer.echo("No saved config.")


auth_app = typer.Typer(help="Auth subcommands")
app.add_typer(auth_app, name="auth")


@auth_app.command("status", help="Show whether a wallet key is saved")
def auth_status() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo("Not logged in.")
        return
    typer.echo(f"base_url: {cfg.get('base_url', '')}")
    typer.echo(f"wallet: {'yes' if cfg.get('private_key') else 'no'}")


@auth_app.command("verify", help="Sign the server challenge and show the authenticated user")
def auth_verify(
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    client = _require_client(base_url, private_key)
    try:
        result = _sign_in(client)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    user = verify_user(result)
    typer.echo(f"address: {client.wallet_address}")
    typer.echo(f"user: {user_username(user) or '-'}")
    perms = user_permissions(user)
    if perms:
        typer.echo(f"permissions: {','.join(perms)}")


# ------------------------- health / info -------------------------


@app.command("health", help="Check server health (no auth)")
def health_cmd(base_url: _base_url_option = None) -> None:
    cfg = load_config() or {}
    client = Web3DAVClient(base_url=base_url or cfg.get("base_url") or DEFAULT_BASE_URL, timeout=30.0)
    try:
        data = client.health()
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


@app.command("info", help="Show saved base_url and wallet status")
def info_cmd() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo(f"Not logged in. Commands use {DEFAULT_BASE_URL} unless --base-url is given.")
        return
    typer.echo(f"base_url: {cfg.get('base_url')}")
    typer.echo(f"wallet: {'yes' if cfg.get('private_key') else 'no'}")


# ------------------------- list / ls -------------------------


def _cmd_list_impl(path_or_url: str, base_url: str | None, private_key: str | None) -> None:
    path, url_override = _parse_path_or_url(path_or_url or "/")
    client = _require_client(url_override or base_url, private_key)
    try:
        _sign_in(client)
        r = client.list_directory(path)
        body = r.text
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo(body)


@app.command("list", help="List directory (prints the PROPFIND multistatus body)")
def list_cmd(
    path: Annotated[str, typer.Argument(help="Directory path or full URL (default: /)")] = "/",
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    _cmd_list_impl(path, base_url, private_key)


@app.command("ls", help="Alias for list")
def ls_cmd(
    path: Annotated[str, typer.Argument(help="Directory path or full URL (default: /)")] = "/",
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    _cmd_list_impl(path, base_url, private_key)


# ------------------------- upload -------------------------


@app.command("upload", help="Upload a local file")
def upload_cmd(
    local: Annotated[Path, typer.Argument(help="Local file path")],
    remote: Annotated[Optional[str], typer.Argument(help="Remote path or full URL (default: /<local name>)")] = None,
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    if not local.is_file():
        typer.echo(f"error: not a file: {local}", err=True)
        raise typer.Exit(1)
    path, url_override = _parse_path_or_url(remote or local.name)
    client = _require_client(url_override or base_url, private_key)
    try:
        _sign_in(client)
        client.upload_file(path, local.read_bytes())
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo("Uploaded.")


# ------------------------- download -------------------------


@app.command("download", help="Download a file (decoded as text)")
def download_cmd(
    remote: Annotated[str, typer.Argument(help="Remote path or full URL (e.g. /docs/a.txt)")],
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Local path, '-' for stdout (default: same name)")] = None,
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    path, url_override = _parse_path_or_url(remote)
    out = output or Path(path).name
    if not out:
        typer.echo("error: cannot infer output name, pass --output", err=True)
        raise typer.Exit(1)
    client = _require_client(url_override or base_url, private_key)
    try:
        _sign_in(client)
        content = client.download_file(path)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    if out == "-":
        typer.echo(content, nl=False)
        return
    Path(out).parent.mkdir(parents=True, exist_ok=True)
    Path(out).write_text(content, encoding="utf-8")
    typer.echo(f"Saved to {out}.")


# ------------------------- mkdir -------------------------


@app.command("mkdir", help="Create a directory (path or full URL)")
def mkdir_cmd(
    path: Annotated[str, typer.Argument(help="Remote path or full URL (e.g. /docs/new)")],
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    path, url_override = _parse_path_or_url(path)
    client = _require_client(url_override or base_url, private_key)
    try:
        _sign_in(client)
        client.create_directory(path)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo("Created.")


# ------------------------- delete -------------------------


@app.command("delete", help="Delete a file or directory (path or full URL)")
def delete_cmd(
    path: Annotated[str, typer.Argument(help="Remote path or full URL (e.g. /docs/a.txt)")],
    base_url: _base_url_option = None,
    private_key: _private_key_option = None,
) -> None:
    path, url_override = _parse_path_or_url(path)
    client = _require_client(url_override or base_url, private_key)
    try:
        _sign_in(client)
        client.delete_file(path)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo("Deleted.")


# ------------------------- main -------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
