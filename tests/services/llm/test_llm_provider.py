from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.services.llm import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMRateLimitError,
    get_llm_config,
    get_token_limit_kwargs,
    supports_response_format,
)
from src.services.llm.langchain_provider import LangChainProvider
from src.services.llm.utils import clean_thinking_tags, is_local_llm_server, sanitize_url

_LLM_ENV = (
    "LLM_BINDING",
    "LLM_MODEL",
    "LLM_API_KEY",
    "LLM_HOST",
    "LLM_API_VERSION",
    "OPENAI_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_API_BASE",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _LLM_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class FakeChatModel:
    def __init__(self, *, content=None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.messages = None

    async def ainvoke(self, messages, config=None):
        self.messages = messages
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


def _use_model(monkeypatch: pytest.MonkeyPatch, model: FakeChatModel) -> None:
    monkeypatch.setattr(LangChainProvider, "_get_llm", classmethod(lambda cls, **kwargs: model))


def test_sanitize_url_strips_completions_suffix():
    assert sanitize_url("https://api.example.com/v1/chat/completions") == "https://api.example.com/v1"
    assert sanitize_url("https://api.example.com/v1/") == "https://api.example.com/v1"


def test_local_server_detection():
    assert is_local_llm_server("http://localhost:11434") is True
    assert is_local_llm_server("https://api.siliconflow.cn/v1") is False


def test_clean_thinking_tags():
    text = "<think>let me see</think>\nFinal answer"
    assert clean_thinking_tags(text, "openai", "deepseek-r1") == "Final answer"
    assert clean_thinking_tags("plain", "openai", "gpt-4o") == "plain"


def test_token_limit_keyword_depends_on_model():
    assert get_token_limit_kwargs("gpt-4o", 100) == {"max_tokens": 100}
    assert get_token_limit_kwargs("o3-mini", 100) == {"max_completion_tokens": 100}


def test_response_format_support():
    assert supports_response_format("openai", "deepseek-ai/DeepSeek-V3.2") is True
    assert supports_response_format("anthropic", "claude-sonnet") is False


def test_llm_config_defaults(clean_env):
    config = get_llm_config()

    assert config.binding == "openai"
    assert config.model == "deepseek-ai/DeepSeek-V3.2"
    assert config.base_url == "https://api.siliconflow.cn/v1"
    assert config.api_key is None


def test_llm_config_prefers_llm_variables(clean_env):
    clean_env.setenv("OPENAI_MODEL", "gpt-4o-mini")
    clean_env.setenv("LLM_MODEL", "qwen-max")
    clean_env.setenv("OPENAI_API_KEY", "sk-openai")
    clean_env.setenv("LLM_HOST", "http://localhost:8000/v1")

    config = get_llm_config()

    assert config.model == "qwen-max"
    assert config.api_key == "sk-openai"
    assert config.base_url == "http://localhost:8000/v1"


def test_llm_config_anthropic_key(clean_env):
    clean_env.setenv("LLM_BINDING", "anthropic")
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant")

    config = get_llm_config()

    assert config.binding == "anthropic"
    assert config.api_key == "sk-ant"
    assert config.base_url is None


def test_build_messages_from_history():
    messages = LangChainProvider._build_messages(
        "ignored",
        "ignored",
        [
            {"role": "system", "content": "s"},
            {"role": "assistant", "content": "a"},
            {"role": "user", "content": "u"},
        ],
    )

    assert [type(m).__name__ for m in messages] == ["SystemMessage", "AIMessage", "HumanMessage"]


async def test_complete_returns_text_without_thinking(monkeypatch):
    model = FakeChatModel(content="<think>hmm</think>Ask about the midpoint.")
    _use_model(monkeypatch, model)

    text = await LangChainProvider.complete(prompt="hi", system_prompt="sys", model="qwen3-32b")

    assert text == "Ask about the midpoint."
    assert [m.content for m in model.messages] == ["sys", "hi"]


async def test_complete_joins_content_blocks(monkeypatch):
    _use_model(monkeypatch, FakeChatModel(content=[{"type": "text", "text": "Hello "}, {"type": "text", "text": "there"}]))

    assert await LangChainProvider.complete(prompt="hi", model="claude-sonnet", binding="anthropic") == "Hello there"


@pytest.mark.parametrize(
    "error, expected",
    [
        (RuntimeError("Error code: 401 - invalid api key"), LLMAuthenticationError),
        (RuntimeError("Error code: 429 - rate limit reached"), LLMRateLimitError),
        (RuntimeError("connection reset"), LLMAPIError),
    ],
)
async def test_complete_maps_provider_errors(monkeypatch, error, expected):
    _use_model(monkeypatch, FakeChatModel(error=error))

    with pytest.raises(expected):
        await LangChainProvider.complete(prompt="hi", model="gpt-4o")


def test_llm_config_ollama_defaults_to_local_server(clean_env):
    clean_env.setenv("LLM_BINDING", "ollama")
    clean_env.setenv("LLM_MODEL", "qwen2.5")

    config = get_llm_config()

    assert config.base_url == "http://localhost:11434"
    assert config.api_key is None
