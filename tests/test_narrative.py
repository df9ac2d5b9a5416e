from types import SimpleNamespace

import pytest

from career_compass.core.config import Settings
from career_compass.core.errors import UpstreamDegradedError
from career_compass.services.narrative import (
    NullNarrativeGenerator,
    OpenAINarrativeGenerator,
    get_narrative_generator,
)


class _FakeCompletions:
    def __init__(self, content=None, exc=None):
        self.content = content
        self.exc = exc
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_null_generator_always_degrades():
    with pytest.raises(UpstreamDegradedError):
        NullNarrativeGenerator().complete("hi", 0.7)


def test_openai_generator_passes_prompt_and_temperature():
    completions = _FakeCompletions(content='["a", "b"]')
    gen = OpenAINarrativeGenerator(api_key="sk-test", model="gpt-test", client=_client(completions))
    assert gen.complete("prompt text", 0.8, system="be kind") == '["a", "b"]'
    assert completions.kwargs["model"] == "gpt-test"
    assert completions.kwargs["temperature"] == 0.8
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "be kind"}
    assert completions.kwargs["messages"][1]["content"] == "prompt text"


@pytest.mark.parametrize("completions", [_FakeCompletions(exc=TimeoutError("slow")), _FakeCompletions(content="   ")])
def test_openai_generator_failures_degrade(completions):
    gen = OpenAINarrativeGenerator(api_key="sk-test", client=_client(completions))
    with pytest.raises(UpstreamDegradedError):
        gen.complete("prompt", 0.7)


def test_factory_selects_generator():
    assert isinstance(get_narrative_generator(Settings()), NullNarrativeGenerator)
    assert isinstance(get_narrative_generator(Settings(narrative_provider="openai")), NullNarrativeGenerator)
    gen = get_narrative_generator(Settings(narrative_provider="openai", openai_api_key="sk-test"))
    assert isinstance(gen, OpenAINarrativeGenerator)
    assert gen.model == "gpt-4o-mini"
