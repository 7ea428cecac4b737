"""Path-based identifiers for components in a render tree."""

from __future__ import annotations


class IdContext:
    """Builds unique component ids from the current position in the tree.

    An id is the path of segments ``name[index]`` joined by ``_``, where the
    index counts how often ``name`` was pushed under the same parent path.
    """

    def __init__(self) -> None:
        self.path: list[str] = []
        self.counts: dict[str, int] = {}

    def init_path(self) -> None:
        """Start a fresh render pass."""
        self.path = []
        self.counts = {}

    def push(self, name: str) -> str:
        """Descend into a child named ``name`` and return its id."""
        parent = self.current()
        count_key = f"{parent}_{name}" if parent else name
        index = self.counts.get(count_key, 0)
        self.counts[count_key] = index + 1
        self.path.append(f"{name}[{index}]")
        return self.current()

    def pop(self) -> None:
        """Return to the parent position; does nothing at the root."""
        if self.path:
            self.path.pop()

    def current(self) -> str:
        """Id of the current position."""
        return "_".join(self.path)