from __future__ import annotations

from io import BytesIO

import pytest
from pypdf import PdfReader
from reportlab.pdfgen import canvas

from formpdf.model.field import FieldType
from formpdf.model.template import FormTemplate
from formpdf.pdf.writer import PdfWriteError, draw_document, write_filled_pdf
from formpdf.render.composer import compose
from formpdf.render.errors import PageIndexOutOfRange, UnsupportedFieldKind
from formpdf.render.transform import Origin
from tests.conftest import make_base_pdf, make_field


def _reader(data: bytes) -> PdfReader:
    return PdfReader(BytesIO(data))


def test_export_without_base_synthesizes_letter_pages(contact_template):
    contact_template.schemas.append([make_field("page_two")])

    data = write_filled_pdf(contact_template, {"full_name": "Jane Doe", "page_two": "Second"})

    reader = _reader(data)
    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.width) == 612.0
    assert float(reader.pages[0].mediabox.height) == 792.0
    assert "Jane Doe" in reader.pages[0].extract_text()
    assert "Second" in reader.pages[1].extract_text()


def test_export_is_byte_for_byte_repeatable(contact_template):
    record = {"full_name": "Jane", "notes": "a\nb", "agree": True}

    assert write_filled_pdf(contact_template, record) == write_filled_pdf(contact_template, record)


def test_absent_values_are_not_burned_in(contact_template):
    data = write_filled_pdf(contact_template, {})

    assert "Your name" not in _reader(data).pages[0].extract_text()


def test_export_writes_output_file(contact_template, tmp_path):
    output = tmp_path / "filled.pdf"

    data = write_filled_pdf(contact_template, {"full_name": "Jane"}, output)

    assert output.read_bytes() == data


def test_overlay_is_merged_onto_base_pages():
    base = make_base_pdf([(612.0, 792.0), (612.0, 792.0)], label="ORIGINAL")
    template = FormTemplate(schemas=[[make_field("full_name")]], base_pdf=base)

    reader = _reader(write_filled_pdf(template, {"full_name": "Jane Doe"}))

    assert len(reader.pages) == 2
    first = reader.pages[0].extract_text()
    assert "ORIGINAL 1" in first and "Jane Doe" in first
    assert "ORIGINAL 2" in reader.pages[1].extract_text()


def test_template_longer_than_base_fails_fast():
    template = FormTemplate(schemas=[[], [], []], base_pdf=make_base_pdf([(612.0, 792.0)] * 2))

    with pytest.raises(PageIndexOutOfRange):
        write_filled_pdf(template, {})


def test_unknown_kind_propagates_unwrapped(tmp_path):
    template = FormTemplate(schemas=[[make_field("x", "slider")]])
    output = tmp_path / "never.pdf"

    with pytest.raises(UnsupportedFieldKind):
        write_filled_pdf(template, {"x": 1}, output)
    assert not output.exists()


def test_existing_widgets_are_stripped_from_base():
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=(612.0, 792.0))
    report.acroForm.textfield(name="old", x=72, y=700, width=200, height=20)
    report.showPage()
    report.save()
    template = FormTemplate(schemas=[[make_field("old")]], base_pdf=buffer.getvalue())

    reader = _reader(write_filled_pdf(template, {"old": "value"}))

    assert "/Annots" not in reader.pages[0]
    assert "/AcroForm" not in reader.trailer["/Root"]


def test_widgets_can_be_kept():
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=(612.0, 792.0))
    report.acroForm.textfield(name="old", x=72, y=700, width=200, height=20)
    report.showPage()
    report.save()
    template = FormTemplate(schemas=[[]], base_pdf=buffer.getvalue())

    reader = _reader(write_filled_pdf(template, {}, strip_widgets=False))

    assert "/Annots" in reader.pages[0]


def test_checkbox_glyph_uses_dingbats(contact_template):
    data = write_filled_pdf(contact_template, {"agree": True})

    fonts = reader_fonts(_reader(data))
    assert any("ZapfDingbats" in name for name in fonts)


def test_draw_document_rejects_screen_primitives(contact_template):
    document = compose(contact_template, {}, origin=Origin.TOP_LEFT)

    with pytest.raises(PdfWriteError):
        draw_document(document)


def test_multiple_kinds_render_into_one_page():
    template = FormTemplate(
        schemas=[
            [
                make_field("n", FieldType.NUMBER),
                make_field("d", FieldType.DATE, y=140.0),
                make_field("m", FieldType.MULTILINE_TEXT, y=180.0, height=60.0),
            ]
        ]
    )

    text = _reader(write_filled_pdf(template, {"n": 42, "d": "2024-05-01", "m": "line one\nline two"})).pages[0].extract_text()

    for expected in ("42", "2024-05-01", "line one", "line two"):
        assert expected in text


def reader_fonts(reader: PdfReader) -> list[str]:
    resources = reader.pages[0]["/Resources"]
    fonts = resources["/Font"]
    return [str(fonts[key]["/BaseFont"]) for key in fonts]
