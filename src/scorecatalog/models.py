"""Core ScoreCatalog data models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from scorecatalog.ingestion.gen_parser import parse_gen_file
from scorecatalog.utils.files import split_relative_path

# Score attribute -> metadata key
KNOWN_FIELDS: Dict[str, str] = {
    "title": "title",
    "composer": "composer",
    "time_signature": "timeSignature",
    "tempo": "tempo",
    "key_signature": "keySignature",
}


@dataclass(frozen=True, slots=True)
class Score:
    """A score file as discovered under the scores directory."""

    path: str
    filename: str
    category: str
    full_category: str
    content: str
    notation: str
    metadata: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_document(cls, relative_path: str, content: str) -> "Score":
        parsed = parse_gen_file(content)
        filename, category, full_category = split_relative_path(relative_path)
        return cls(
            path=relative_path,
            filename=filename,
            category=category,
            full_category=full_category,
            content=content,
            notation=parsed.notation,
            metadata=parsed.metadata,
        )

    @property
    def title(self) -> Optional[str]:
        return self.metadata.get(KNOWN_FIELDS["title"])

    @property
    def composer(self) -> Optional[str]:
        return self.metadata.get(KNOWN_FIELDS["composer"])

    @property
    def time_signature(self) -> Optional[str]:
        return self.metadata.get(KNOWN_FIELDS["time_signature"])

    @property
    def tempo(self) -> Optional[str]:
        return self.metadata.get(KNOWN_FIELDS["tempo"])

    @property
    def key_signature(self) -> Optional[str]:
        return self.metadata.get(KNOWN_FIELDS["key_signature"])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names used by the API."""
        data: Dict[str, Any] = {
            "path": self.path,
            "filename": self.filename,
            "category": self.category,
            "fullCategory": self.full_category,
            "content": self.content,
            "notation": self.notation,
        }
        for attribute, key in KNOWN_FIELDS.items():
            data[key] = getattr(self, attribute)
        data["metadata"] = dict(self.metadata)
        return data


@dataclass(slots=True)
class ScoreFilter:
    """Optional criteria combined with logical AND; empty values are ignored."""

    title: Optional[str] = None
    composer: Optional[str] = None
    category: Optional[str] = None
    time_signature: Optional[str] = None
    tempo: Optional[str] = None
    key_signature: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(getattr(self, item.name) for item in fields(self))
