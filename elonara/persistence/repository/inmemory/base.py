"""Snapshot support shared by the in-memory repositories."""

import copy
from typing import Any


class SnapshotMixin:
    """Lets the in-memory transaction manager roll a repository back.

    Stored entities are immutable, so a shallow copy of the containers is
    a complete snapshot.
    """

    _state_attrs: tuple[str, ...] = ()

    def snapshot(self) -> dict[str, Any]:
        return {name: copy.copy(getattr(self, name)) for name in self._state_attrs}

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)
