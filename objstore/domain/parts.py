from __future__ import annotations

from objstore.infra.storage.client import CompletedPart


class PartCompletionRegister:
    """Collects completed parts in any order and hands them back sorted."""

    def __init__(self) -> None:
        self._parts: dict[int, CompletedPart] = {}

    def __len__(self) -> int:
        return len(self._parts)

    def add(self, part: CompletedPart) -> None:
        if part.part_number in self._parts:
            raise ValueError(f"Part {part.part_number} already registered")
        self._parts[part.part_number] = part

    def finalize(self) -> list[CompletedPart]:
        """Return the parts ascending by part number, as completion requires."""
        return sorted(self._parts.values(), key=lambda p: p.part_number)
