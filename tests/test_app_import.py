import importlib
from typing import cast
from types import SimpleNamespace

from openai import OpenAI

from config.settings import OpenAISettings
from core import QueryFilters, aggregate, generate_ai_summary


def test_app_package_exports_main():
    module = importlib.import_module("app")

    assert hasattr(module, "main"), "app package should expose main entrypoint"


def test_generate_ai_summary_uses_injected_client(sample_records):
    filters = QueryFilters(name="kim")
    result = aggregate(sample_records, filters)

    class DummyClient:
        def __init__(self):
            self.called = False

        class Chat:
            def __init__(self, outer):
                self.outer = outer

            class Completions:
                def __init__(self, outer):
                    self.outer = outer

                def create(self, **_: object):
                    self.outer.outer.called = True
                    return SimpleNamespace(
                        choices=[SimpleNamespace(message=SimpleNamespace(content="- 요약"))]
                    )

            @property
            def completions(self):
                return DummyClient.Chat.Completions(self)

        @property
        def chat(self):
            return DummyClient.Chat(self)

    client = DummyClient()

    lines = generate_ai_summary(
        result,
        filters,
        settings=OpenAISettings(),
        client_factory=lambda: cast(OpenAI, client),
    )

    assert client.called, "Injected client should be used for AI summary generation"
    assert lines == ["요약"]
