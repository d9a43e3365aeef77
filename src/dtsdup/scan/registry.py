from pathlib import Path, PurePosixPath
from typing import Iterator


class ModuleRecord:
    """A custom module identifier discovered during a walk.

    Attributes:
        id: Declared module identifier, e.g. ``DS/Foo/Bar``
        declared_at_path: Declaration file in which the identifier was first seen
        external_path: Matching declaration file under a search root, if one was found
        exists_externally: True iff external_path was found
    """

    def __init__(self, id: str, declared_at_path: Path):
        self.id = id
        self.declared_at_path = declared_at_path
        self.external_path: Path | None = None
        self.exists_externally: bool = False

    @property
    def relative_external_path(self) -> PurePosixPath:
        """Path of the compiled counterpart relative to ``<root>/win_b64/typings``.

        The leading namespace segment is dropped: ``DS/Foo/Bar`` maps to ``Foo/Bar.d.ts``.
        """
        segments = self.id.split('/')[1:]
        segments[-1] += '.d.ts'
        return PurePosixPath(*segments)

    def mark_external(self, external_path: Path):
        self.external_path = external_path
        self.exists_externally = True

    def __repr__(self):
        return (f"ModuleRecord(id={self.id!r}, declared_at_path={str(self.declared_at_path)!r}, "
                f"external_path={None if self.external_path is None else str(self.external_path)!r})")


class ModuleRegistry:
    """Identifier to ModuleRecord mapping built up by a single walk.

    Insertion is first-wins: a later declaration of an identifier that is already
    registered leaves the existing record untouched.
    """

    def __init__(self):
        self._records: dict[str, ModuleRecord] = {}

    def add(self, module_id: str, declared_at_path: Path) -> bool:
        """Register an identifier unless it is already known.

        Returns:
            True if a new record was inserted, False if the identifier was already registered
        """
        if module_id in self._records:
            return False
        self._records[module_id] = ModuleRecord(module_id, declared_at_path)
        return True

    def get(self, module_id: str) -> ModuleRecord | None:
        return self._records.get(module_id)

    def records(self) -> list[ModuleRecord]:
        return list(self._records.values())

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._records

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
