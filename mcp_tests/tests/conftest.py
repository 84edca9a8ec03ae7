import pytest


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool/resource/prompt registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.resources = {}
        self.prompts = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator

    def resource(self, uri: str, **kwargs):
        def _decorator(fn):
            self.resources[uri] = fn
            return fn
        return _decorator

    def prompt(self, *, name: str, **kwargs):
        def _decorator(fn):
            self.prompts[name] = fn
            return fn
        return _decorator


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture(autouse=True)
def _no_kroki_endpoint_env(monkeypatch):
    # Keep endpoint resolution independent of the developer's shell.
    monkeypatch.delenv("KROKI_ENDPOINT", raising=False)
