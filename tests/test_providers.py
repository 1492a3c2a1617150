from types import SimpleNamespace

import openai
import pytest
import requests
from google.genai import errors as genai_errors

from dish_analyzer.config import ProviderCredentials
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import Caption, RawAnalysis
from dish_analyzer.providers import build_providers
from dish_analyzer.providers.gemini import GeminiProvider
from dish_analyzer.providers.huggingface import HuggingFaceProvider
from dish_analyzer.providers.openai_vision import OpenAIVisionProvider
from dish_analyzer.providers.replicate import ReplicateCaptionProvider

from tests.conftest import FakeResponse, FakeSession

ANSWER = '{"meal_name":"Dal Chawal","calories":380,"protein_g":14,"carbs_g":62,"fat_g":8}'


# -----------------------------------
# Gemini
# -----------------------------------


class FakeGeminiModels:
    def __init__(self, outcomes):
        self.outcomes = dict(outcomes)
        self.models_called = []

    def generate_content(self, model, contents, config):
        self.models_called.append(model)
        outcome = self.outcomes[model]
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(text=outcome, candidates=[])


def gemini_with(outcomes):
    models = FakeGeminiModels(outcomes)
    provider = GeminiProvider("key", models=list(outcomes), client=SimpleNamespace(models=models))
    return provider, models


def test_gemini_returns_first_model_text(request_):
    provider, models = gemini_with({"m1": ANSWER, "m2": "unused"})
    assert provider.analyze(request_) == RawAnalysis(text=ANSWER)
    assert models.models_called == ["m1"]


def test_gemini_falls_through_errors_and_empty_text(request_):
    provider, models = gemini_with({"m1": RuntimeError("network down"), "m2": "  ", "m3": ANSWER})
    assert provider.analyze(request_).text == ANSWER
    assert models.models_called == ["m1", "m2", "m3"]


def test_gemini_fails_after_all_models(request_):
    not_found = genai_errors.APIError(404, {"error": {"code": 404, "message": "model not found", "status": "NOT_FOUND"}})
    provider, _ = gemini_with({"m1": RuntimeError("boom"), "m2": not_found})
    with pytest.raises(AdapterFailure) as exc:
        provider.analyze(request_)
    assert exc.value.provider == "Gemini"
    assert exc.value.status_code == 404


# -----------------------------------
# OpenAI
# -----------------------------------


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def openai_with(completions):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIVisionProvider("key", client=client)


def test_openai_sends_data_uri_and_returns_text(request_):
    completions = FakeCompletions(content=f"  {ANSWER}\n")
    assert openai_with(completions).analyze(request_) == RawAnalysis(text=ANSWER)

    content = completions.kwargs["messages"][0]["content"]
    assert content[0]["image_url"]["url"] == request_.data_uri
    assert completions.kwargs["model"] == "gpt-4o-mini"


@pytest.mark.parametrize("completions", [FakeCompletions(content=""), FakeCompletions(error=openai.OpenAIError("quota"))])
def test_openai_failures(request_, completions):
    with pytest.raises(AdapterFailure) as exc:
        openai_with(completions).analyze(request_)
    assert exc.value.provider == "OpenAI"


# -----------------------------------
# Replicate
# -----------------------------------


@pytest.mark.parametrize("output", ["a plate of idli and sambar", ["a plate of idli and sambar"]])
def test_replicate_returns_caption(request_, output):
    session = FakeSession([FakeResponse(201, {"status": "succeeded", "output": output})])
    provider = ReplicateCaptionProvider("token", session=session)

    assert provider.analyze(request_) == Caption(text="a plate of idli and sambar")
    call = session.calls[0]
    assert call.json["input"]["image"] == request_.data_uri
    assert call.headers["Authorization"] == "Bearer token"


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(401, {"detail": "Invalid token"}),
        FakeResponse(201, {"status": "processing", "output": None}),
        requests.ConnectionError("refused"),
    ],
)
def test_replicate_failures(request_, response):
    provider = ReplicateCaptionProvider("token", session=FakeSession([response]))
    with pytest.raises(AdapterFailure):
        provider.analyze(request_)


# -----------------------------------
# Hugging Face
# -----------------------------------


def hf_with(responses, caption_models=("retired", "loading", "blip")):
    session = FakeSession(responses)
    sleeps = []
    provider = HuggingFaceProvider(
        "token",
        caption_models=caption_models,
        text_model="zephyr",
        session=session,
        sleep=sleeps.append,
        retry_delay=3,
    )
    return provider, session, sleeps


def test_hf_skips_retired_and_retries_loading_model(request_):
    provider, session, sleeps = hf_with(
        [
            FakeResponse(410),
            FakeResponse(503),
            FakeResponse(200, [{"generated_text": "a bowl of dal"}]),
            FakeResponse(200, [{"generated_text": ANSWER}]),
        ]
    )

    assert provider.analyze(request_) == RawAnalysis(text=ANSWER, caption="a bowl of dal")
    assert sleeps == [3]
    assert [c.url.rsplit("/", 1)[-1] for c in session.calls] == ["retired", "loading", "loading", "zephyr"]
    assert session.calls[0].data == request_.image_bytes


def test_hf_moves_on_when_loading_retry_fails(request_):
    provider, session, sleeps = hf_with(
        [
            FakeResponse(503),
            FakeResponse(503),
            FakeResponse(200, [{"generated_text": "rice"}]),
            FakeResponse(500),
        ],
        caption_models=("loading", "blip"),
    )

    assert provider.analyze(request_) == RawAnalysis(text="", caption="rice")
    assert sleeps == [3]


def test_hf_inference_failure_keeps_caption(request_):
    provider, _, _ = hf_with(
        [FakeResponse(200, [{"generated_text": "paneer tikka"}]), requests.Timeout("slow")],
        caption_models=("blip",),
    )
    assert provider.analyze(request_) == RawAnalysis(text="", caption="paneer tikka")


def test_hf_fails_without_caption(request_):
    provider, _, sleeps = hf_with(
        [FakeResponse(410), requests.ConnectionError("down"), FakeResponse(200, [{"generated_text": ""}])]
    )
    with pytest.raises(AdapterFailure) as exc:
        provider.analyze(request_)
    assert exc.value.provider == "HuggingFace"
    assert sleeps == []


# -----------------------------------
# Factory
# -----------------------------------


def test_factory_orders_and_skips_unconfigured():
    providers = build_providers(ProviderCredentials(replicate_api_token="r", huggingface_token="h"))
    assert [type(p) for p in providers] == [ReplicateCaptionProvider, HuggingFaceProvider]


def test_factory_builds_full_cascade_in_priority_order():
    providers = build_providers(
        ProviderCredentials(gemini_api_key="g", openai_api_key="o", replicate_api_token="r", huggingface_token="h")
    )
    assert [p.name for p in providers] == ["Gemini", "OpenAI", "Replicate", "HuggingFace"]


def test_factory_reads_environment(monkeypatch, no_credentials):
    assert build_providers() == []
    monkeypatch.setenv("HUGGINGFACE_TOKEN", "h")
    assert [p.name for p in build_providers()] == ["HuggingFace"]
