from __future__ import annotations

import pytest

from formpdf import config
from formpdf.model.field import FieldType
from formpdf.render.errors import UnsupportedFieldKind
from formpdf.render.fields import FieldRenderer, is_checked, split_lines, stringify
from formpdf.render.primitives import DrawGlyph, DrawLines, DrawRect, DrawText
from formpdf.render.transform import Target
from tests.conftest import make_field

SCREEN = Target.screen(792)
PDF = Target.pdf(792)


@pytest.mark.parametrize("kind", [FieldType.TEXT, FieldType.NUMBER, FieldType.EMAIL, FieldType.DATE])
def test_single_line_kinds_draw_one_clipped_text_run(kind):
    field = make_field("value", kind)

    primitives = FieldRenderer(SCREEN).render(field, "2024-01-31")

    assert len(primitives) == 1
    text = primitives[0]
    assert isinstance(text, DrawText)
    assert text.text == "2024-01-31"
    assert text.x == field.x + config.TEXT_PADDING
    assert text.clip.left == field.x and text.clip.width == field.width


def test_single_line_text_is_vertically_centered():
    field = make_field("name", y=100.0, height=30.0)

    text = FieldRenderer(SCREEN).render(field, "Jane")[0]

    assert 100.0 + 15.0 < text.baseline < 130.0


def test_centering_agrees_between_screen_and_pdf_targets():
    field = make_field("name", y=250.0, height=42.0, font_size=14.0)

    screen = FieldRenderer(SCREEN).render(field, "Jane")[0]
    pdf = FieldRenderer(PDF).render(field, "Jane")[0]

    assert pdf.baseline == pytest.approx(792 - screen.baseline)
    assert pdf.x == screen.x


def test_values_are_stringified_without_reformatting():
    assert stringify(1234.5) == "1234.5"
    assert stringify(7) == "7"
    assert stringify(7.0) == "7"
    assert stringify(-0.0) == "0"
    assert stringify(True) == "true"
    assert stringify("01/02/2024") == "01/02/2024"


def test_multiline_clips_lines_whose_top_leaves_the_box():
    field = make_field("notes", FieldType.MULTILINE_TEXT, height=40.0, font_size=20.0)

    primitives = FieldRenderer(SCREEN).render(field, "first\nsecond\nthird")

    assert len(primitives) == 1
    lines = primitives[0]
    assert isinstance(lines, DrawLines)
    assert [line.text for line in lines.lines] == ["first", "second"]
    assert lines.lines[1].baseline - lines.lines[0].baseline == pytest.approx(24.0)


def test_multiline_stacks_downward_in_pdf_space():
    field = make_field("notes", FieldType.MULTILINE_TEXT, height=80.0, font_size=10.0)

    lines = FieldRenderer(PDF).render(field, "a\r\nb\rc")[0]

    baselines = [line.baseline for line in lines.lines]
    assert [line.text for line in lines.lines] == ["a", "b", "c"]
    assert baselines == sorted(baselines, reverse=True)
    assert baselines[0] < lines.clip.top


def test_split_lines_keeps_blank_lines():
    assert split_lines("a\n\nb") == ["a", "", "b"]


def test_unchecked_checkbox_draws_only_its_border():
    field = make_field("agree", FieldType.BOOLEAN, width=20.0, height=20.0)

    primitives = FieldRenderer(PDF).render(field, False)

    assert len(primitives) == 1
    assert isinstance(primitives[0], DrawRect)
    assert primitives[0].line_width == config.CHECKBOX_BORDER_WIDTH


def test_checked_checkbox_draws_border_and_glyph():
    field = make_field("agree", FieldType.BOOLEAN, width=40.0, height=20.0)

    border, glyph = FieldRenderer(SCREEN).render(field, True)

    assert isinstance(border, DrawRect)
    assert isinstance(glyph, DrawGlyph)
    assert border.box.width == border.box.height == 20.0
    assert border.box.left == field.x and border.box.top == field.y
    assert glyph.center_x == field.x + 10.0
    assert glyph.center_y == field.y + 10.0


@pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("", False), ("yes", True), (1, True)])
def test_checkbox_truthiness(value, expected):
    assert is_checked(value) is expected


def test_absent_value_draws_nothing():
    field = make_field("name")

    assert FieldRenderer(PDF).render(field, None) == []


def test_design_path_shows_placeholder_label():
    field = make_field("name", placeholder="Your name")

    outline, label = FieldRenderer(SCREEN).render_design(field)

    assert isinstance(outline, DrawRect)
    assert isinstance(label, DrawText)
    assert label.text == "Your name"
    assert label.color == config.PLACEHOLDER_COLOR


def test_design_path_falls_back_to_kind_name():
    field = make_field("when", FieldType.DATE)

    label = FieldRenderer(SCREEN).render_design(field)[1]

    assert label.text == "date"


def test_unknown_kind_fails_even_without_a_value():
    field = make_field("mystery", "unknown")

    with pytest.raises(UnsupportedFieldKind) as info:
        FieldRenderer(PDF).render(field, None)
    assert info.value.kind == "unknown"
    with pytest.raises(UnsupportedFieldKind):
        FieldRenderer(SCREEN).render_design(field)


def test_font_size_scales_with_target():
    field = make_field("name", font_size=12.0)

    text = FieldRenderer(Target.screen(792, 2.0)).render(field, "x")[0]

    assert text.font_size == 24.0
    assert text.clip.width == 300.0
