"""Template model: ordered pages of fields, optional base PDF and sample data."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Mapping

from formpdf.model.field import FormField

DataRecord = Mapping[str, Any]

_DATA_URI_PREFIX = "data:"


class TemplateError(RuntimeError):
    """Raised when template JSON cannot be parsed."""


def decode_base_pdf(value: str | bytes | None) -> bytes | None:
    if value is None or value == "" or value == b"":
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    payload = value.strip()
    if payload.startswith(_DATA_URI_PREFIX):
        _, _, payload = payload.partition(",")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TemplateError("basePdf is not valid base64 data") from exc


def encode_base_pdf(data: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


@dataclass(slots=True)
class FormTemplate:
    schemas: list[list[FormField]] = field(default_factory=list)
    base_pdf: bytes | None = None
    sampledata: list[dict[str, Any]] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.schemas)

    def get_page_fields(self, page_index: int) -> list[FormField]:
        if page_index < 0 or page_index >= len(self.schemas):
            return []
        return self.schemas[page_index]

    def all_fields(self) -> list[FormField]:
        merged: list[FormField] = []
        for page_fields in self.schemas:
            merged.extend(page_fields)
        return merged

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FormTemplate:
        raw_schemas = data.get("schemas") or []
        if not isinstance(raw_schemas, list):
            raise TemplateError("schemas must be a list of pages")

        schemas: list[list[FormField]] = []
        for page_index, page in enumerate(raw_schemas):
            if not isinstance(page, list):
                raise TemplateError(f"Page {page_index + 1} must be a list of fields")
            try:
                schemas.append([FormField.from_dict(entry) for entry in page])
            except (AttributeError, TypeError, ValueError) as exc:
                raise TemplateError(f"Malformed field on page {page_index + 1}") from exc

        sampledata = data.get("sampledata") or []
        if not isinstance(sampledata, list):
            raise TemplateError("sampledata must be a list of records")

        return cls(
            schemas=schemas,
            base_pdf=decode_base_pdf(data.get("basePdf")),
            sampledata=[dict(record) for record in sampledata if isinstance(record, Mapping)],
        )

    @classmethod
    def from_json(cls, text: str) -> FormTemplate:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TemplateError(f"Template is not valid JSON: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise TemplateError("Template JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path) -> FormTemplate:
        source = Path(path)
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise TemplateError(f"Failed to read template: {source}") from exc
        return cls.from_json(text)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "schemas": [[f.to_dict() for f in page] for page in self.schemas],
        }
        if self.base_pdf:
            data["basePdf"] = encode_base_pdf(self.base_pdf)
        if self.sampledata:
            data["sampledata"] = [dict(record) for record in self.sampledata]
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
