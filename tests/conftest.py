from __future__ import annotations

from io import BytesIO
import os

import pytest
from reportlab.pdfgen import canvas

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from formpdf.model.field import FieldType, FormField  # noqa: E402
from formpdf.model.template import FormTemplate  # noqa: E402


def make_field(name: str, field_type: FieldType | str = FieldType.TEXT, **overrides) -> FormField:
    values = {"x": 100.0, "y": 100.0, "width": 150.0, "height": 30.0}
    values.update(overrides)
    return FormField(name=name, field_type=field_type, **values)


def make_base_pdf(page_sizes: list[tuple[float, float]], label: str = "BASE") -> bytes:
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=page_sizes[0], invariant=1)
    for index, size in enumerate(page_sizes):
        report.setPageSize(size)
        report.setFont("Helvetica", 10)
        report.drawString(20, 20, f"{label} {index + 1}")
        report.showPage()
    report.save()
    return buffer.getvalue()


@pytest.fixture
def contact_template() -> FormTemplate:
    return FormTemplate(
        schemas=[
            [
                make_field("full_name", placeholder="Your name"),
                make_field("email", FieldType.EMAIL, y=140.0),
                make_field("notes", FieldType.MULTILINE_TEXT, y=180.0, height=80.0),
                make_field("agree", FieldType.BOOLEAN, y=280.0, width=20.0, height=20.0),
            ]
        ],
        sampledata=[{"full_name": "Jane Doe", "email": "jane@example.com"}],
    )
