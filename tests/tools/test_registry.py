"""Tests for picocode/tools/registry.py - tool registration and invocation."""

from pathlib import Path

import pytest
from pydantic import BaseModel

from picocode.config.schema import Configuration
from picocode.tools.base import Tool
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolKind, ToolResult
from picocode.tools.registry import ToolRegistry


class EchoParams(BaseModel):
    text: str


class EchoTool(Tool):
    name = "echo"
    description = "Echo text back"
    kind = ToolKind.READ
    schema = EchoParams
    primary_param = "text"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        return ToolResult.success_result(invocation.params["text"])


class PathParams(BaseModel):
    path: str


class TouchTool(Tool):
    name = "touch"
    description = "Resolve a path and fail if asked to"
    kind = ToolKind.WRITE
    schema = PathParams

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        path = self.resolve(invocation, invocation.params["path"])
        if path.name == "missing":
            raise FileNotFoundError(f"No such file: {path.name}")
        if path.name == "boom":
            raise RuntimeError("boom")
        return ToolResult.success_result(str(path))


@pytest.fixture
def registry(config: Configuration) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(EchoTool(config))
    registry.register(TouchTool(config))
    return registry


class TestRegistration:
    """Tests for register, unregister and lookup."""

    def test_register_and_get(self, registry: ToolRegistry):
        assert "echo" in registry
        assert len(registry) == 2
        assert registry.get("echo").name == "echo"

    def test_unregister(self, registry: ToolRegistry):
        assert registry.unregister("echo")
        assert not registry.unregister("echo")
        assert "echo" not in registry

    def test_overwrite_warns(self, registry: ToolRegistry, config: Configuration, caplog):
        registry.register(EchoTool(config))
        assert len(registry) == 2
        assert "Overwriting existing tool: echo" in caplog.text

    def test_schemas_in_registration_order(self, registry: ToolRegistry):
        schemas = registry.get_schemas()
        assert [schema["name"] for schema in schemas] == ["echo", "touch"]
        assert schemas[0]["parameters"]["required"] == ["text"]


class TestInvoke:
    """Tests for invoke error conversion."""

    @pytest.mark.asyncio
    async def test_success(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("echo", {"text": "hi"}, workspace)
        assert result.success
        assert result.output == "hi"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("nope", {}, workspace)
        assert result.error_kind == ToolErrorKind.UNKNOWN_TOOL
        assert result.error == "Unknown tool: nope"

    @pytest.mark.asyncio
    async def test_invalid_params(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("echo", {"raw_arguments": "not json"}, workspace)
        assert result.error_kind == ToolErrorKind.INVALID_PARAMS
        assert result.error.startswith("Invalid parameters: ")

    @pytest.mark.asyncio
    async def test_sandbox_violation(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("touch", {"path": "../outside"}, workspace)
        assert result.error_kind == ToolErrorKind.SANDBOX
        assert result.to_model_output() == (
            "Error: Access denied: path must be within the current directory"
        )

    @pytest.mark.asyncio
    async def test_io_error(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("touch", {"path": "missing"}, workspace)
        assert result.error_kind == ToolErrorKind.IO
        assert "No such file" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_error(self, registry: ToolRegistry, workspace: Path):
        result = await registry.invoke("touch", {"path": "boom"}, workspace)
        assert result.error_kind == ToolErrorKind.INTERNAL
        assert result.error == "Internal error: boom"
