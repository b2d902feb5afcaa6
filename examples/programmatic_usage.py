import asyncio
import json

from agent_orchestrator import AgentConfig, AgentController
from agent_orchestrator.clients.anthropic import AnthropicClient
from agent_orchestrator.config import get_settings
from agent_orchestrator.core import ToolRegistry
from agent_orchestrator.logging import setup_logging
from agent_orchestrator.tools import WebSearchTool, WriteFileTool


async def main():
    setup_logging("INFO")
    settings = get_settings()
    if not settings.anthropic_api_key:
        print("Please set ANTHROPIC_API_KEY in .env")
        return

    # 1. The client talks to the provider; retries happen in the controller
    client = AnthropicClient(
        api_key=settings.anthropic_api_key,
        system_prompt="You are a research assistant. Save summaries with write_file.",
    )

    # 2. Pick the tools the model may call
    registry = ToolRegistry([
        WebSearchTool(),
        WriteFileTool(allowed_dir="./data"),
    ])

    # 3. Build the controller
    config = AgentConfig.from_settings(settings)
    config.max_iterations = 5
    controller = AgentController(client, config, registry=registry)

    # 4. Run a turn; the session keeps the history for follow-ups
    result = await controller.run("demo", "Find the latest Python release and save a summary to python.txt")
    print(result.content)
    if result.is_partial:
        print(f"(stopped early: {result.outcome.value})")

    answer = await controller.process_message("demo", "Which file did you write?")
    print(answer)

    print(json.dumps(controller.get_metrics(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
