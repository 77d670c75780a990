from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Rubygem:
    id: int
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Rubygem":
        return cls(id=row["id"], name=row["name"], created_at=row.get("created_at"))


@dataclass
class Version:
    id: int
    rubygem_name: str
    number: str
    full_name: str
    platform: str = "ruby"
    indexed: bool = True
    prerelease: bool = False
    summary: Optional[str] = None
    description: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    built_at: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Version":
        authors = row.get("authors") or ""
        return cls(
            id=row["id"],
            rubygem_name=row["rubygem_name"],
            number=row["number"],
            full_name=row["full_name"],
            platform=row.get("platform") or "ruby",
            indexed=bool(row.get("indexed", 1)),
            prerelease=bool(row.get("prerelease", 0)),
            summary=row.get("summary"),
            description=row.get("description"),
            authors=[a.strip() for a in authors.split(",") if a.strip()],
            built_at=row.get("built_at"),
            created_at=row.get("created_at"),
        )

    def to_payload(self, downloads_count: int) -> Dict[str, Any]:
        """Public descriptor served by the versions and top-downloads endpoints."""
        return {
            "authors": ", ".join(self.authors),
            "built_at": self.built_at,
            "description": self.description,
            "downloads_count": downloads_count,
            "number": self.number,
            "summary": self.summary,
            "platform": self.platform,
            "prerelease": self.prerelease,
        }
