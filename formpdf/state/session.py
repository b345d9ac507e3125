"""In-memory designer session: a mutable working copy of a template."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from typing import Any

from formpdf import config
from formpdf.model.field import FieldType, FormField, parse_field_type
from formpdf.model.template import FormTemplate
from formpdf.render.errors import PageIndexOutOfRange

DEFAULT_ORIGIN = (100.0, 100.0)
DUPLICATE_OFFSET = 12.0

_EDITABLE = {f.name for f in dataclass_fields(FormField)}


def default_size(field_type: FieldType) -> tuple[float, float]:
    if field_type is FieldType.BOOLEAN:
        return 20.0, 20.0
    if field_type is FieldType.MULTILINE_TEXT:
        return 150.0, 80.0
    return 150.0, 30.0


@dataclass(slots=True)
class TemplateSession:
    template: FormTemplate = field(default_factory=lambda: FormTemplate(schemas=[[]]))
    page_sizes: list[tuple[float, float]] = field(default_factory=list)
    _counter: int = 1

    @classmethod
    def from_template(
        cls,
        template: FormTemplate,
        page_sizes: list[tuple[float, float]] | None = None,
    ) -> TemplateSession:
        session = cls(template=deepcopy(template), page_sizes=list(page_sizes or []))
        if not session.template.schemas:
            session.template.schemas.append([])
        session._sync_counter()
        return session

    def to_template(self) -> FormTemplate:
        return deepcopy(self.template)

    def get_page_fields(self, page_index: int) -> list[FormField]:
        return self.template.get_page_fields(page_index)

    def page_size(self, page_index: int) -> tuple[float, float]:
        if 0 <= page_index < len(self.page_sizes):
            return self.page_sizes[page_index]
        return config.DEFAULT_PAGE_SIZE

    def add_page(self) -> int:
        self._check_page_available(len(self.template.schemas))
        self.template.schemas.append([])
        return len(self.template.schemas) - 1

    def find_field(self, page_index: int, name: str) -> FormField:
        for candidate in self._page(page_index):
            if candidate.name == name:
                return candidate
        raise KeyError(f"No field '{name}' on page {page_index + 1}")

    def add_field(self, page_index: int, field_type: FieldType, name: str | None = None) -> FormField:
        if page_index >= len(self.template.schemas):
            self._check_page_available(page_index)
        while len(self.template.schemas) <= page_index:
            self.template.schemas.append([])

        page_fields = self.template.schemas[page_index]
        width, height = default_size(field_type)
        new_field = FormField(
            name=name or self._next_name(page_index),
            field_type=field_type,
            x=DEFAULT_ORIGIN[0],
            y=DEFAULT_ORIGIN[1],
            width=width,
            height=height,
            placeholder=f"Enter {field_type.value}",
        )
        self._ensure_unique(page_index, new_field.name)
        page_fields.append(new_field)
        return new_field

    def update_field(self, page_index: int, name: str, **changes: Any) -> FormField:
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValueError(f"Unknown field attribute(s): {', '.join(sorted(unknown))}")

        if "field_type" in changes:
            changes["field_type"] = parse_field_type(changes["field_type"])

        page_fields = self._page(page_index)
        current = self.find_field(page_index, name)
        new_name = changes.get("name", name)
        if new_name != name:
            self._ensure_unique(page_index, new_name)

        updated = replace(current, **changes)
        page_fields[page_fields.index(current)] = updated
        return updated

    def delete_field(self, page_index: int, name: str) -> FormField:
        page_fields = self._page(page_index)
        target = self.find_field(page_index, name)
        page_fields.remove(target)
        return target

    def move_field(self, page_index: int, name: str, x: float, y: float) -> FormField:
        target = self.find_field(page_index, name)
        page_w, page_h = self.page_size(page_index)
        max_x = max(0.0, page_w - target.width)
        max_y = max(0.0, page_h - target.height)
        target.x = max(0.0, min(x, max_x))
        target.y = max(0.0, min(y, max_y))
        return target

    def duplicate_field(self, page_index: int, name: str) -> FormField:
        source = self.find_field(page_index, name)
        duplicate = deepcopy(source)
        duplicate.name = self._next_name(page_index)

        page_w, page_h = self.page_size(page_index)
        duplicate.x = min(source.x + DUPLICATE_OFFSET, max(0.0, page_w - duplicate.width))
        duplicate.y = min(source.y + DUPLICATE_OFFSET, max(0.0, page_h - duplicate.height))
        self._page(page_index).append(duplicate)
        return duplicate

    def _check_page_available(self, page_index: int) -> None:
        # Template pages map one-to-one onto base document pages
        if self.template.base_pdf and page_index >= len(self.page_sizes):
            raise PageIndexOutOfRange(page_index, len(self.page_sizes))

    def _page(self, page_index: int) -> list[FormField]:
        if page_index < 0 or page_index >= len(self.template.schemas):
            raise KeyError(f"No page {page_index + 1}")
        return self.template.schemas[page_index]

    def _ensure_unique(self, page_index: int, name: str) -> None:
        if any(f.name == name for f in self._page(page_index)):
            raise ValueError(f"Field '{name}' already exists on page {page_index + 1}")

    def _next_name(self, page_index: int) -> str:
        taken = {f.name for f in self._page(page_index)}
        while f"field_{self._counter}" in taken:
            self._counter += 1
        name = f"field_{self._counter}"
        self._counter += 1
        return name

    def _sync_counter(self) -> None:
        highest = 0
        for candidate in self.template.all_fields():
            prefix, _, suffix = candidate.name.partition("_")
            if prefix != "field":
                continue
            try:
                highest = max(highest, int(suffix))
            except ValueError:
                continue
        self._counter = highest + 1
