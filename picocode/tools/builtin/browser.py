"""
Browser automation tool backed by the ``agent-browser`` executable.
"""

import logging
import shutil

from pydantic import BaseModel, Field

from picocode.tools.base import Tool
from picocode.tools.builtin.shell import build_shell_environment, run_shell_command
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)

AGENT_BROWSER_EXECUTABLE: str = "agent-browser"


class AgentBrowserParams(BaseModel):
    args: str = Field(
        ...,
        description="Arguments for agent-browser, e.g. 'open https://example.com'",
    )


def is_agent_browser_available() -> bool:
    return shutil.which(AGENT_BROWSER_EXECUTABLE) is not None


class AgentBrowserTool(Tool):
    """
    Tool that drives a headless browser through ``agent-browser``.

    Only registered when the executable is on ``PATH``.
    """

    name: str = "agent_browser"
    description: str = (
        "Control a web browser with the agent-browser CLI. Pass its "
        "arguments, e.g. 'open https://example.com' or 'snapshot'."
    )
    kind: ToolKind = ToolKind.NETWORK
    schema: type[AgentBrowserParams] = AgentBrowserParams
    primary_param: str = "args"
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = AgentBrowserParams(**invocation.params)

        output, exit_code = await run_shell_command(
            f"{AGENT_BROWSER_EXECUTABLE} {params.args}",
            invocation.cwd,
            build_shell_environment(self.config.shell_environment),
        )

        return ToolResult.success_result(output, exit_code=exit_code)
