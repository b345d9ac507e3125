"""Data record checks and statistics used before rendering a submission."""

from __future__ import annotations

import re
from typing import Any

from formpdf.model.field import FieldType
from formpdf.model.template import DataRecord, FormTemplate

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return value is False


def validate_record(template: FormTemplate, record: DataRecord) -> dict[str, str]:
    """Return a mapping of field name to error message; empty when valid."""
    errors: dict[str, str] = {}

    for field in template.all_fields():
        value = record.get(field.name)
        if field.required and is_blank(value):
            errors[field.name] = f"{field.name} is required"

        if not isinstance(value, str) or not value:
            continue

        if field.field_type is FieldType.EMAIL and not EMAIL_PATTERN.match(value):
            errors[field.name] = "Please enter a valid email address"
        elif field.field_type is FieldType.NUMBER and not _is_number(value):
            errors[field.name] = "Please enter a valid number"

    return errors


def default_record(template: FormTemplate) -> dict[str, Any]:
    if template.sampledata:
        return dict(template.sampledata[0])
    return {}


def field_count(template: FormTemplate) -> int:
    return sum(len(page) for page in template.schemas)


def filled_field_count(template: FormTemplate, record: DataRecord) -> int:
    filled = 0
    for field in template.all_fields():
        value = record.get(field.name)
        if value is not None and value != "":
            filled += 1
    return filled


def _is_number(value: str) -> bool:
    text = value.strip()
    if not text:
        return True
    try:
        float(text)
    except ValueError:
        return False
    return text.lower() not in {"nan", "inf", "-inf", "+inf", "infinity", "-infinity"}
