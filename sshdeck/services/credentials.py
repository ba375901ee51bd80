"""Credential resolution for connect requests."""

import logging
from collections.abc import Mapping
from typing import Any, Final

from sshdeck.exceptions import InvalidConfig
from sshdeck.models import AuthMethod, ConnectionConfig, KeyAuth, PasswordAuth

logger = logging.getLogger(__name__)

DEFAULT_PORT: Final[int] = 22
MAX_PORT: Final[int] = 65535


def parse_port(value: Any) -> int:
    """Parse a port, falling back to 22 for anything outside 1-65535.

    Args:
        value: Raw port (int, str, or None)

    Returns:
        Valid TCP port
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_PORT
    try:
        port = int(str(value).strip())
    except ValueError:
        logger.debug("Unparseable port %r, using %d", value, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 1 <= port <= MAX_PORT:
        logger.debug("Port %d out of range, using %d", port, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


def _text(raw: Mapping[str, Any], *keys: str) -> str:
    """First non-None value among keys, as a string."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return str(value)
    return ""


def resolve_credentials(
    raw: Mapping[str, Any],
    auth_method: AuthMethod | str,
) -> ConnectionConfig:
    """Normalize a raw connect request into a ConnectionConfig.

    Only the fields relevant to the selected method are carried over; the
    other method's values are ignored even when present.

    Args:
        raw: Mapping with host, port, username, password, identity_path
            (or private_key_path) and passphrase
        auth_method: "password" or "key"

    Returns:
        ConnectionConfig with exactly one authentication payload

    Raises:
        InvalidConfig: If host or username is empty, or the method is unknown
    """
    host = _text(raw, "host").strip()
    username = _text(raw, "username").strip()

    if not host:
        raise InvalidConfig("Host cannot be empty")
    if not username:
        raise InvalidConfig("Username cannot be empty")

    tag = auth_method.strip().lower() if isinstance(auth_method, str) else auth_method
    try:
        method = AuthMethod(tag)
    except ValueError:
        raise InvalidConfig(
            f"Unknown authentication method: {auth_method!r}",
            context="expected 'password' or 'key'",
        ) from None

    auth: PasswordAuth | KeyAuth
    if method is AuthMethod.PASSWORD:
        auth = PasswordAuth(password=_text(raw, "password"))
    else:
        auth = KeyAuth(
            identity_path=_text(raw, "identity_path", "private_key_path").strip(),
            passphrase=_text(raw, "passphrase") or None,
        )

    return ConnectionConfig(
        host=host,
        username=username,
        port=parse_port(raw.get("port")),
        auth=auth,
    )
