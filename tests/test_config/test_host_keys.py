"""Tests for HostKeyVerifier."""

from pathlib import Path

import pytest

from sshdeck.config.host_keys import HostKeyVerifier


def test_verifier_uses_custom_path(tmp_path: Path) -> None:
    """Verifier accepts custom known_hosts path."""
    custom = tmp_path / "my_known_hosts"
    custom.touch()

    verifier = HostKeyVerifier(known_hosts_path=str(custom))
    assert verifier.get_known_hosts_path() == str(custom)
    assert verifier.is_enabled()


def test_verifier_disabled_with_none() -> None:
    """Verifier can be disabled with 'none' path."""
    verifier = HostKeyVerifier(known_hosts_path="NONE")
    assert verifier.get_known_hosts_path() is None
    assert not verifier.is_enabled()


def test_missing_file_does_not_fail_construction(tmp_path: Path) -> None:
    """Resolution is deferred until the path is needed."""
    HostKeyVerifier(known_hosts_path=str(tmp_path / "nonexistent"))


def test_verifier_raises_on_missing_file_strict_mode(tmp_path: Path) -> None:
    """Verifier raises on first use if file missing in strict mode."""
    verifier = HostKeyVerifier(
        known_hosts_path=str(tmp_path / "nonexistent"), strict_checking=True
    )
    with pytest.raises(FileNotFoundError, match="known_hosts file not found"):
        verifier.get_known_hosts_path()


def test_verifier_disables_on_missing_file_non_strict(tmp_path: Path) -> None:
    """Non-strict mode falls back to no verification."""
    verifier = HostKeyVerifier(
        known_hosts_path=str(tmp_path / "nonexistent"), strict_checking=False
    )
    assert verifier.get_known_hosts_path() is None


def test_resolution_is_cached(tmp_path: Path) -> None:
    """The path is resolved once even if the file disappears later."""
    custom = tmp_path / "known_hosts"
    custom.touch()
    verifier = HostKeyVerifier(known_hosts_path=str(custom))

    assert verifier.get_known_hosts_path() == str(custom)
    custom.unlink()
    assert verifier.get_known_hosts_path() == str(custom)


def test_default_path_under_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a configured path the user's ~/.ssh/known_hosts is used."""
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    known_hosts = tmp_path / ".ssh" / "known_hosts"
    known_hosts.parent.mkdir()
    known_hosts.touch()

    verifier = HostKeyVerifier()
    assert verifier.get_known_hosts_path() == str(known_hosts)
