import sys
import types
import uuid
import importlib.util
from pathlib import Path


def _find_server_py() -> Path:
    root = Path(__file__).resolve().parents[2]
    candidates = [
        root / "server.py",
        root / "server" / "server.py",
        root / "src" / "server" / "server.py",
    ]
    for p in candidates:
        if p.exists():
            return p
    raise FileNotFoundError(f"Could not find server.py. Tried: {candidates}")


def _install_fake_modules(monkeypatch, captures: dict):
    # ---- Fake mcp.server.fastmcp.FastMCP ----
    mcp_mod = types.ModuleType("mcp")
    mcp_server_mod = types.ModuleType("mcp.server")
    fastmcp_mod = types.ModuleType("mcp.server.fastmcp")

    class DummyFastMCP:
        def __init__(self, name: str):
            captures["fastmcp_name"] = name
            captures["mcp_instance"] = self
            self.run_calls = []

        def run(self, *, transport: str):
            self.run_calls.append({"transport": transport})
            captures["run_calls"] = list(self.run_calls)

    fastmcp_mod.FastMCP = DummyFastMCP

    mcp_mod.__path__ = []
    mcp_server_mod.__path__ = []

    monkeypatch.setitem(sys.modules, "mcp", mcp_mod)
    monkeypatch.setitem(sys.modules, "mcp.server", mcp_server_mod)
    monkeypatch.setitem(sys.modules, "mcp.server.fastmcp", fastmcp_mod)

    # ---- Fake config ----
    config_mod = types.ModuleType("config")
    config_mod.HTTP_VERIFY = False
    config_mod.KROKI_TIMEOUT = 12.3
    config_mod.KROKI_COMPOSE_FILE = Path("/tmp/compose.yml")
    config_mod.LOG_LEVEL = "DEBUG"
    monkeypatch.setitem(sys.modules, "config", config_mod)

    # ---- Fake logging setup ----
    log_mod = types.ModuleType("core.log")

    def setup_logging(level="INFO", stream=None):
        captures["log_level"] = level

    log_mod.setup_logging = setup_logging
    monkeypatch.setitem(sys.modules, "core.log", log_mod)

    # ---- Fake clients / service ----
    def _ensure_pkg(name: str):
        pkg = types.ModuleType(name)
        pkg.__path__ = []
        monkeypatch.setitem(sys.modules, name, pkg)

    _ensure_pkg("clients")
    _ensure_pkg("service")

    kroki_client_mod = types.ModuleType("clients.kroki_client")
    compose_mod = types.ModuleType("service.compose")

    class FakeKrokiClient:
        def __init__(self, *, endpoint=None, timeout: float = 20.0, verify: bool = True):
            captures["kroki_client_ctor_calls"] = captures.get("kroki_client_ctor_calls", []) + [
                {"endpoint": endpoint, "timeout": timeout, "verify": verify}
            ]
            captures["kroki_client_instance"] = self

    class FakeComposeService:
        def __init__(self, *, endpoint, runner=None, compose_file=None):
            captures["compose_ctor_calls"] = captures.get("compose_ctor_calls", []) + [
                {"endpoint": endpoint, "compose_file": compose_file}
            ]
            captures["compose_instance"] = self

    kroki_client_mod.KrokiClient = FakeKrokiClient
    compose_mod.ComposeService = FakeComposeService

    monkeypatch.setitem(sys.modules, "clients.kroki_client", kroki_client_mod)
    monkeypatch.setitem(sys.modules, "service.compose", compose_mod)

    # ---- Fake tools + resources + prompts ----
    _ensure_pkg("tools")
    _ensure_pkg("resources")
    _ensure_pkg("prompts")

    tools_render_mod = types.ModuleType("tools.render_diagram")
    tools_endpoint_mod = types.ModuleType("tools.endpoint")
    tools_service_mod = types.ModuleType("tools.service")
    res_mod = types.ModuleType("resources.diagram_types")
    prompts_mod = types.ModuleType("prompts.diagram_prompt")

    def register_render_diagram(mcp, *, kroki_client=None):
        captures["register_render_calls"] = captures.get("register_render_calls", []) + [
            {"mcp": mcp, "kroki_client": kroki_client}
        ]

    def register_endpoint(mcp, *, endpoint):
        captures["register_endpoint_calls"] = captures.get("register_endpoint_calls", []) + [
            {"mcp": mcp, "endpoint": endpoint}
        ]

    def register_service(mcp, *, service):
        captures["register_service_calls"] = captures.get("register_service_calls", []) + [
            {"mcp": mcp, "service": service}
        ]

    def register_resources(mcp):
        captures["register_resources_calls"] = captures.get("register_resources_calls", []) + [{"mcp": mcp}]

    def register_prompts(mcp):
        captures["register_prompts_calls"] = captures.get("register_prompts_calls", []) + [{"mcp": mcp}]

    tools_render_mod.register = register_render_diagram
    tools_endpoint_mod.register = register_endpoint
    tools_service_mod.register = register_service
    res_mod.register_resources = register_resources
    prompts_mod.register_prompts = register_prompts

    monkeypatch.setitem(sys.modules, "tools.render_diagram", tools_render_mod)
    monkeypatch.setitem(sys.modules, "tools.endpoint", tools_endpoint_mod)
    monkeypatch.setitem(sys.modules, "tools.service", tools_service_mod)
    monkeypatch.setitem(sys.modules, "resources.diagram_types", res_mod)
    monkeypatch.setitem(sys.modules, "prompts.diagram_prompt", prompts_mod)


def _load_server_module(monkeypatch, captures: dict):
    _install_fake_modules(monkeypatch, captures)

    server_path = _find_server_py()
    mod_name = f"server_under_test_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(mod_name, server_path)
    assert spec and spec.loader

    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, mod_name, module)
    spec.loader.exec_module(module)
    return module


def test_server_register_all_and_di(monkeypatch):
    from core.endpoint import EndpointConfig

    captures = {}
    module = _load_server_module(monkeypatch, captures)

    assert captures["fastmcp_name"] == "kroki-mcp"
    mcp = captures["mcp_instance"]

    # Client and service are created once and share one endpoint config
    assert len(captures["kroki_client_ctor_calls"]) == 1
    kroki_ctor = captures["kroki_client_ctor_calls"][0]
    assert kroki_ctor["timeout"] == 12.3
    assert kroki_ctor["verify"] is False
    assert isinstance(kroki_ctor["endpoint"], EndpointConfig)

    assert len(captures["compose_ctor_calls"]) == 1
    compose_ctor = captures["compose_ctor_calls"][0]
    assert compose_ctor["endpoint"] is kroki_ctor["endpoint"]
    assert compose_ctor["compose_file"] == Path("/tmp/compose.yml")

    # Tools receive the injected instances
    assert captures["register_render_calls"][0]["kroki_client"] is captures["kroki_client_instance"]
    assert captures["register_endpoint_calls"][0]["endpoint"] is kroki_ctor["endpoint"]
    assert captures["register_service_calls"][0]["service"] is captures["compose_instance"]

    # resources + prompts are registered
    assert captures["register_resources_calls"][0]["mcp"] is mcp
    assert captures["register_prompts_calls"][0]["mcp"] is mcp

    # main() configures logging and runs stdio transport
    module.main()
    assert captures["log_level"] == "DEBUG"
    assert captures["run_calls"] == [{"transport": "stdio"}]
