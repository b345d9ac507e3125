from __future__ import annotations

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from formpdf.summary import SummaryError, build_summary_prompt, summarize_submission


class _FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: _FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_prompt_lists_every_field():
    prompt = build_summary_prompt("Intake", {"name": "Jane", "age": 42})

    assert '"Intake"' in prompt
    assert "name: Jane\nage: 42" in prompt


def test_summary_is_requested_with_configured_model():
    completions = _FakeCompletions(content="  Jane, 42, applied.  ")

    summary = summarize_submission("Intake", {"name": "Jane"}, client=_client(completions), model="test-model")

    assert summary == "Jane, 42, applied."
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["messages"][0]["role"] == "system"
    assert "name: Jane" in call["messages"][1]["content"]


def test_empty_summary_is_an_error():
    with pytest.raises(SummaryError):
        summarize_submission("Intake", {"name": "Jane"}, client=_client(_FakeCompletions(content="")))


def test_api_failures_are_wrapped():
    completions = _FakeCompletions(error=OpenAIError("quota exceeded"))

    with pytest.raises(SummaryError):
        summarize_submission("Intake", {"name": "Jane"}, client=_client(completions))


def test_missing_input_is_rejected():
    with pytest.raises(SummaryError):
        summarize_submission("", {"name": "Jane"}, client=_client(_FakeCompletions(content="x")))
    with pytest.raises(SummaryError):
        summarize_submission("Intake", {}, client=_client(_FakeCompletions(content="x")))
