"""Variable table for rdcalc: a chain of frames, innermost first."""

from typing import Any, Iterator

from rdcalc.rdcalc_error import UndefinedVariableError


class Environment:
    """One frame of bindings plus a link to the enclosing frame.

    Attributes:
        table (dict[str, Any]): Bindings made in this frame.
        parent (Environment | None): The enclosing frame, or None for the global frame.
    """

    def __init__(self, parent: "Environment | None" = None) -> None:
        self.table: dict[str, Any] = {}
        self.parent = parent

    def lookup(self, name: str) -> Any:
        frame: Environment | None = self
        while frame is not None:
            if name in frame.table:
                return frame.table[name]
            frame = frame.parent
        raise UndefinedVariableError(f"Undefined variable '{name}'")

    def define(self, name: str, value: Any) -> Any:
        self.table[name] = value
        return value

    def child(self) -> "Environment":
        return Environment(parent=self)

    def names(self) -> list[str]:
        """Every name visible from this frame, sorted."""
        seen: set[str] = set()
        frame: Environment | None = self
        while frame is not None:
            seen.update(frame.table)
            frame = frame.parent
        return sorted(seen)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(sorted(self.table.items()))

    def __contains__(self, name: object) -> bool:
        frame: Environment | None = self
        while frame is not None:
            if name in frame.table:
                return True
            frame = frame.parent
        return False

    def __repr__(self) -> str:
        depth = 0
        frame = self.parent
        while frame is not None:
            depth += 1
            frame = frame.parent
        return f"Environment(names={sorted(self.table)!r}, depth={depth})"
