"""Form field model definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from formpdf import config


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    DATE = "date"
    MULTILINE_TEXT = "multiline-text"
    BOOLEAN = "boolean"

    @classmethod
    def _missing_(cls, value: object) -> FieldType | None:
        # Kind names used by persisted designer templates
        aliases = {"textarea": cls.MULTILINE_TEXT, "checkbox": cls.BOOLEAN}
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if member.value == key:
                return member
        return aliases.get(key)


def parse_field_type(value: Any) -> FieldType | str:
    """Return the matching FieldType, or the raw string for unknown kinds."""
    if isinstance(value, FieldType):
        return value
    try:
        return FieldType(value)
    except ValueError:
        return str(value)


@dataclass(slots=True)
class FormField:
    name: str
    field_type: FieldType | str
    x: float
    y: float
    width: float
    height: float
    font_size: float = config.DEFAULT_FONT_SIZE
    required: bool = False
    placeholder: str = ""

    @property
    def type_name(self) -> str:
        if isinstance(self.field_type, FieldType):
            return self.field_type.value
        return str(self.field_type)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormField:
        kind = data.get("type", data.get("kind", FieldType.TEXT.value))
        font_size = data.get("fontSize")
        return cls(
            name=str(data.get("name", "")),
            field_type=parse_field_type(kind),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            font_size=float(font_size) if font_size else config.DEFAULT_FONT_SIZE,
            required=bool(data.get("required", False)),
            placeholder=str(data.get("placeholder") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type_name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "fontSize": self.font_size,
            "required": self.required,
        }
        if self.placeholder:
            data["placeholder"] = self.placeholder
        return data
