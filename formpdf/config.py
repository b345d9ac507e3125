"""Rendering defaults and environment-driven settings."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from reportlab.lib.pagesizes import letter

load_dotenv(".env.local")
load_dotenv()

# Page synthesized for every schema page when a template has no base PDF
DEFAULT_PAGE_SIZE: tuple[float, float] = (float(letter[0]), float(letter[1]))

DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12.0
LINE_HEIGHT_FACTOR = 1.2
TEXT_PADDING = 2.0
CHECKBOX_BORDER_WIDTH = 1.0
CHECK_GLYPH_RATIO = 0.8

# Preview
PREVIEW_ZOOM = 1.25
TEXT_COLOR = "#000000"
PLACEHOLDER_COLOR = "#8a8a8a"
OUTLINE_COLOR = "#cccccc"

# AI summary collaborator
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
SUMMARY_MODEL = os.getenv("FORMPDF_SUMMARY_MODEL", "gpt-4o-mini")
SUMMARY_MAX_TOKENS = int(os.getenv("FORMPDF_SUMMARY_MAX_TOKENS", "300"))
SUMMARY_TEMPERATURE = float(os.getenv("FORMPDF_SUMMARY_TEMPERATURE", "0.3"))
