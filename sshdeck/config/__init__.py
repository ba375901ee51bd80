"""Configuration module for SSH Deck.

- Config: Main configuration class (aggregates all components)
- HostKeyVerifier: Manages SSH host key verification
- Settings: Environment variable configuration
"""

from sshdeck.config.host_keys import HostKeyVerifier
from sshdeck.config.main import Config
from sshdeck.config.settings import Settings

__all__ = ["Config", "HostKeyVerifier", "Settings"]
