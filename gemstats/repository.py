from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Tuple

# Thin repository wrapper over db.py to centralize persistence access.
# The service layer depends on the two protocols below, never on db.py.

from . import db as _db
from .models import Rubygem, Version


class Registry(Protocol):
    def rubygem_name_for(self, full_name: str) -> Optional[str]: ...

    def find_rubygem(self, name: str) -> Optional[Rubygem]: ...

    def public_versions(self, rubygem: Rubygem) -> List[Version]: ...


class CounterStore(Protocol):
    def count(self) -> int: ...

    def for_rubygem(self, rubygem_name: str) -> int: ...

    def for_version(self, full_name: str) -> int: ...

    def for_versions(self, full_names: List[str]) -> Dict[str, int]: ...

    def most_downloaded_today(self, limit: int) -> List[Tuple[Version, int]]: ...


class Repository:
    """sqlite-backed implementation of both Registry and CounterStore."""

    # Registry
    def rubygem_name_for(self, full_name: str) -> Optional[str]:
        return _db.rubygem_name_for(full_name)

    def find_rubygem(self, name: str) -> Optional[Rubygem]:
        row = _db.find_rubygem_by_name(name)
        return Rubygem.from_row(row) if row else None

    def public_versions(self, rubygem: Rubygem) -> List[Version]:
        return [Version.from_row(r) for r in _db.public_versions(rubygem.id)]

    # Download counters
    def count(self) -> int:
        return _db.count()

    def for_rubygem(self, rubygem_name: str) -> int:
        return _db.for_rubygem(rubygem_name)

    def for_version(self, full_name: str) -> int:
        return _db.for_version(full_name)

    def for_versions(self, full_names: List[str]) -> Dict[str, int]:
        return _db.for_versions(full_names)

    def most_downloaded_today(self, limit: int) -> List[Tuple[Version, int]]:
        return [(Version.from_row(row), n) for row, n in _db.most_downloaded_today(limit)]


# App-wide singleton repository
repository = Repository()
