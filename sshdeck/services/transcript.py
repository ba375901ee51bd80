"""Append-only transcript of executed commands."""

from collections.abc import Sequence
from typing import overload

from sshdeck.models import TranscriptEntry


class TranscriptView(Sequence[TranscriptEntry]):
    """Read-only window over the entries present when it was taken.

    Iterating reads from the backing store lazily and can be repeated.
    Entries appended afterwards are not visible through this view.
    """

    def __init__(self, entries: list[TranscriptEntry], length: int) -> None:
        self._entries = entries
        self._length = length

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> TranscriptEntry: ...

    @overload
    def __getitem__(self, index: slice) -> list[TranscriptEntry]: ...

    def __getitem__(
        self, index: int | slice
    ) -> TranscriptEntry | list[TranscriptEntry]:
        if isinstance(index, slice):
            return [self._entries[i] for i in range(*index.indices(self._length))]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("transcript index out of range")
        return self._entries[index]

    def __repr__(self) -> str:
        return f"TranscriptView(len={self._length})"


class TranscriptStore:
    """Ordered log of TranscriptEntry objects for one session."""

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    def append(self, entry: TranscriptEntry) -> None:
        """Append an entry in submission order."""
        self._entries.append(entry)

    def all(self) -> TranscriptView:
        """Entries in submission order."""
        return TranscriptView(self._entries, len(self._entries))

    def clear(self) -> None:
        """Discard every entry (session ended)."""
        # Replace rather than mutate so outstanding views stay valid
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)
