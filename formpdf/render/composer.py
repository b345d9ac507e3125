"""Page composition: template + data record -> per-page primitive lists."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Sequence

from formpdf import config
from formpdf.model.template import DataRecord, FormTemplate
from formpdf.render.errors import InvalidGeometry, PageIndexOutOfRange
from formpdf.render.fields import FieldRenderer
from formpdf.render.primitives import Primitive
from formpdf.render.transform import Origin, Target

logger = logging.getLogger(__name__)

PageSize = tuple[float, float]


class RenderMode(str, Enum):
    EXPORT = "export"
    DESIGN = "design"


@dataclass(frozen=True, slots=True)
class RenderedPage:
    index: int
    width: float
    height: float
    primitives: tuple[Primitive, ...]


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    pages: tuple[RenderedPage, ...]
    origin: Origin
    scale: float

    @property
    def page_indices(self) -> list[int]:
        return [page.index for page in self.pages]


def resolve_page_sizes(
    template: FormTemplate,
    base_sizes: Sequence[PageSize] | None = None,
) -> list[PageSize]:
    """Pick the output size of every template page.

    Template page ``i`` maps to base page ``i``. A template longer than its
    base document is rejected rather than padded with blank pages.
    """
    if base_sizes is None:
        return [config.DEFAULT_PAGE_SIZE for _ in template.schemas]

    if len(template.schemas) > len(base_sizes):
        raise PageIndexOutOfRange(len(base_sizes), len(base_sizes))
    return [tuple(size) for size in base_sizes[: len(template.schemas)]]


def compose(
    template: FormTemplate,
    record: DataRecord | None = None,
    *,
    origin: Origin = Origin.BOTTOM_LEFT,
    scale: float = 1.0,
    mode: RenderMode = RenderMode.EXPORT,
    base_sizes: Sequence[PageSize] | None = None,
    font_name: str = config.DEFAULT_FONT_NAME,
) -> RenderedDocument:
    """Render every page of ``template`` against ``record``.

    ``base_sizes`` are the page sizes of the base document, in points. The
    composer never opens ``template.base_pdf``; drivers that overlay a base
    document read its sizes and pass them in. Without sizes every page uses
    the default page size.
    Nothing is returned unless every page rendered.
    """
    if scale <= 0:
        raise InvalidGeometry(f"Scale must be positive, got {scale}")

    sizes = resolve_page_sizes(template, base_sizes)
    values = record or {}

    pages: list[RenderedPage] = []
    for page_index, page_fields in enumerate(template.schemas):
        width, height = sizes[page_index]
        if origin is Origin.BOTTOM_LEFT:
            # Base pages are already in points; only field geometry scales
            target = Target.pdf(height, scale)
            out_width, out_height = width, height
        else:
            target = Target.screen(height, scale)
            out_width, out_height = width * scale, height * scale
        renderer = FieldRenderer(target, font_name)

        primitives: list[Primitive] = []
        for field in page_fields:
            if mode is RenderMode.DESIGN:
                primitives.extend(renderer.render_design(field))
            else:
                primitives.extend(renderer.render(field, values.get(field.name)))

        logger.debug(
            "Composed page %d: %d field(s), %d primitive(s)",
            page_index + 1,
            len(page_fields),
            len(primitives),
        )
        pages.append(
            RenderedPage(
                index=page_index,
                width=out_width,
                height=out_height,
                primitives=tuple(primitives),
            )
        )

    return RenderedDocument(pages=tuple(pages), origin=origin, scale=scale)
