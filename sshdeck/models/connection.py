"""Connection request data models."""

from dataclasses import dataclass, field
from enum import Enum


class AuthMethod(str, Enum):
    """Authentication method tag selected by the user."""

    PASSWORD = "password"
    KEY = "key"


@dataclass
class PasswordAuth:
    """Password authentication payload."""

    password: str = field(default="", repr=False)

    method = AuthMethod.PASSWORD

    def discard(self) -> None:
        """Blank the stored password."""
        self.password = ""


@dataclass
class KeyAuth:
    """Identity file authentication payload."""

    identity_path: str
    passphrase: str | None = field(default=None, repr=False)

    method = AuthMethod.KEY

    def discard(self) -> None:
        """Blank the stored passphrase."""
        self.passphrase = None


@dataclass
class ConnectionConfig:
    """Validated connection request.

    Holds exactly one authentication payload. Created per connect attempt and
    stripped of secrets once the attempt resolves.
    """

    host: str
    username: str
    auth: PasswordAuth | KeyAuth
    port: int = 22

    @property
    def auth_method(self) -> AuthMethod:
        """Authentication method carried by this config."""
        return self.auth.method

    @property
    def label(self) -> str:
        """Display form user@host:port."""
        return f"{self.username}@{self.host}:{self.port}"

    def discard_secrets(self) -> None:
        """Drop password/passphrase after the connect attempt."""
        self.auth.discard()
