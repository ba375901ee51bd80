"""Utility modules for SSH Deck."""

from sshdeck.utils.console import ColorfulFormatter

__all__ = ["ColorfulFormatter"]
