"""Prose summaries of form submissions from an OpenAI chat model."""

from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI, OpenAIError

from formpdf import config
from formpdf.model.template import DataRecord

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional administrative assistant helping to summarize form "
    "submissions for review. Provide clear, concise summaries that highlight key "
    "information."
)


class SummaryError(RuntimeError):
    """Raised when a submission summary cannot be produced."""


def build_summary_prompt(form_name: str, record: DataRecord) -> str:
    lines = "\n".join(f"{key}: {value}" for key, value in record.items())
    return (
        "Please provide a concise professional summary of the following form "
        f'submission for "{form_name}":\n\n{lines}\n\n'
        "Please format the summary as a brief paragraph that highlights the key "
        "information and purpose of this form submission. Keep it professional "
        "and suitable for administrative review."
    )


def summarize_submission(
    form_name: str,
    record: DataRecord,
    client: Any | None = None,
    model: str = config.SUMMARY_MODEL,
) -> str:
    if not form_name or not record:
        raise SummaryError("Form name and data are required")

    if client is None:
        if not config.OPENAI_API_KEY:
            raise SummaryError("OPENAI_API_KEY is not configured")
        client = OpenAI(api_key=config.OPENAI_API_KEY)

    try:
        completion = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_summary_prompt(form_name, record)},
            ],
            max_tokens=config.SUMMARY_MAX_TOKENS,
            temperature=config.SUMMARY_TEMPERATURE,
        )
    except OpenAIError as exc:
        logger.error("Summary request for '%s' failed: %s", form_name, exc)
        raise SummaryError("Failed to generate summary") from exc

    summary = completion.choices[0].message.content if completion.choices else None
    if not summary:
        raise SummaryError("No summary generated")
    return summary.strip()
