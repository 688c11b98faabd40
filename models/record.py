from dataclasses import dataclass, field
from typing import Any


@dataclass
class Record:
    id: str
    owner_id: str
    category: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "fields": dict(self.fields),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
