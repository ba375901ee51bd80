"""SSH host key verification.

Manages known_hosts file for MITM prevention.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Sentinel distinguishing "not resolved yet" from "verification disabled"
_UNRESOLVED = object()


class HostKeyVerifier:
    """SSH host key verification manager.

    The known_hosts location is resolved on first use, so a missing file
    only fails the connect attempt that needs it rather than server startup.
    """

    def __init__(
        self,
        known_hosts_path: str | None = None,
        strict_checking: bool = True,
    ):
        """Initialize host key verifier.

        Args:
            known_hosts_path: Path to known_hosts file or 'none' to disable
            strict_checking: Reject unknown host keys and missing files
        """
        self.strict_checking = strict_checking
        self._configured = known_hosts_path
        self._known_hosts: object = _UNRESOLVED

    def _resolve_known_hosts(self, env_value: str | None) -> str | None:
        """Resolve known_hosts path with security defaults.

        Returns:
            Path to known_hosts file or None to disable verification

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        if env_value and env_value.lower() == "none":
            logger.critical(
                "SSH HOST KEY VERIFICATION DISABLED. "
                "Vulnerable to MITM attacks; use only on trusted networks."
            )
            return None

        if env_value:
            path = Path(os.path.expanduser(env_value))
            hint = "unset SSHDECK_KNOWN_HOSTS to use ~/.ssh/known_hosts"
        else:
            path = Path.home() / ".ssh" / "known_hosts"
            hint = f"connect once with ssh or run: ssh-keyscan <hostname> >> {path}"

        if path.exists():
            return str(path)

        if self.strict_checking:
            raise FileNotFoundError(
                f"SSH host key verification required but known_hosts file "
                f"not found: {path} ({hint}, or set SSHDECK_KNOWN_HOSTS=none "
                f"to disable verification, NOT RECOMMENDED)"
            )
        logger.warning(
            "known_hosts not found at %s, verification disabled. This is insecure!",
            path,
        )
        return None

    def get_known_hosts_path(self) -> str | None:
        """Get path to known_hosts file, resolving it on first call.

        Returns:
            Path string or None if verification disabled

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        if self._known_hosts is _UNRESOLVED:
            self._known_hosts = self._resolve_known_hosts(self._configured)
        return self._known_hosts  # type: ignore[return-value]

    def is_enabled(self) -> bool:
        """Check if host key verification is enabled."""
        return self.get_known_hosts_path() is not None
