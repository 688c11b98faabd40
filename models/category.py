from dataclasses import dataclass, field

from utils.labels import derive_key


@dataclass
class FieldDefinition:
    name: str
    label: str
    type: str           # 'text' | 'number' | 'boolean'

    @classmethod
    def from_label(cls, label: str, type_: str = "text") -> "FieldDefinition":
        label = label.strip()
        return cls(name=derive_key(label), label=label, type=type_)

    def to_dict(self) -> dict:
        return {"name": self.name, "label": self.label, "type": self.type}


@dataclass
class Category:
    key: str
    name: str
    fields: list[FieldDefinition] = field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDefinition | None:
        return next((f for f in self.fields if f.name == name), None)

    def to_dict(self) -> dict:
        """Document shape stored in categories.json (the key lives outside)."""
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "Category":
        fields = []
        for raw in data.get("fields") or []:
            label = raw.get("label") or raw.get("name") or ""
            fields.append(FieldDefinition(
                name=raw.get("name") or derive_key(label),
                label=label,
                type=raw.get("type") or "text",
            ))
        return cls(key=key, name=data.get("name") or key, fields=fields)
