"""Main entry point for the agent orchestrator CLI.

Handles configuration, tool setup, and either a one-shot prompt or the
interactive chat loop.
"""

import argparse
import asyncio
import json
import sys
import uuid

import yaml

from .agent import AgentConfig, AgentController
from .clients.anthropic import AnthropicClient
from .config import get_settings
from .core import ToolRegistry
from .exceptions import (
    AgentError,
    AuthenticationError,
    ProviderUnavailableError,
    RateLimitError,
)
from .logging import setup_logging
from .tools import get_default_tools


def load_yaml_config(path: str = "config.yaml") -> dict:
    """Load configuration from config.yaml if it exists."""
    try:
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}


def build_config(args: argparse.Namespace, yaml_config: dict) -> AgentConfig:
    """Resolve the loop configuration.

    Priority order:
    1. CLI arguments
    2. Config file (config.yaml, ``llm`` section)
    3. Environment variables (via pydantic settings)
    """
    config = AgentConfig.from_settings(get_settings())
    llm_config = yaml_config.get("llm", {})

    for key in ("model", "max_tokens", "temperature", "max_iterations"):
        if key in llm_config:
            setattr(config, key, llm_config[key])

    if args.model:
        config.model = args.model
    if args.max_iterations:
        config.max_iterations = args.max_iterations
    return config


def build_controller(config: AgentConfig, system_prompt: str | None = None) -> AgentController:
    """Create a controller with the Anthropic client and default tools."""
    settings = get_settings()
    client = AnthropicClient(api_key=settings.anthropic_api_key, system_prompt=system_prompt)
    registry = ToolRegistry(get_default_tools())
    return AgentController(client, config, registry=registry)


async def run_chat(controller: AgentController, session_key: str) -> None:
    """Run the interactive chat loop.

    Args:
        controller: The controller to send messages to.
        session_key: Session all messages belong to.
    """
    print(f"Agent initialized (session {session_key}). Type 'exit' to quit.")
    print("-" * 50)

    while True:
        try:
            user_input = await asyncio.to_thread(input, "You: ")
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if user_input.lower() in ("exit", "quit"):
            print("Goodbye!")
            break

        if not user_input.strip():
            continue

        await ask(controller, session_key, user_input)


async def ask(controller: AgentController, session_key: str, prompt: str) -> bool:
    """Send one message and print the answer.

    Returns:
        True if the message was processed, False if it failed.
    """
    try:
        result = await controller.run(session_key, prompt)
    except AuthenticationError as e:
        print(f"Authentication error: {e}")
        print("Please check your API key.")
    except RateLimitError as e:
        print(f"Rate limit exceeded: {e}")
        print("Please wait a moment and try again.")
    except ProviderUnavailableError as e:
        print(f"Provider unavailable: {e}")
        print("Please try again later.")
    except AgentError as e:
        print(f"Agent error: {e}")
    else:
        print(f"Agent: {result.content}")
        if result.is_partial:
            print(f"[partial answer: {result.outcome.value} after {result.iterations} iterations]")
        return True
    return False


async def _main(args: argparse.Namespace) -> int:
    yaml_config = load_yaml_config(args.config)
    config = build_config(args, yaml_config)
    controller = build_controller(config, yaml_config.get("system_prompt"))
    session_key = args.session or str(uuid.uuid4())

    ok = True
    if args.prompt:
        ok = await ask(controller, session_key, " ".join(args.prompt))
    else:
        await run_chat(controller, session_key)

    if args.metrics:
        print(json.dumps(controller.get_metrics(), indent=2))
    return 0 if ok else 1


def main() -> None:
    """Main entry point for the agent orchestrator CLI."""
    parser = argparse.ArgumentParser(description="Tool-using LLM agent")
    parser.add_argument(
        "prompt",
        nargs="*",
        help="Message to send; starts an interactive chat when omitted",
    )
    parser.add_argument("--model", help="Model to use (overrides config)")
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Model calls allowed per message (overrides config)",
    )
    parser.add_argument("--session", help="Session key to use (random by default)")
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the YAML config file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (also settable via AGENT_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print collected metrics as JSON before exiting",
    )
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_dir)

    if not settings.anthropic_api_key:
        print("Error: ANTHROPIC_API_KEY is not set.")
        sys.exit(1)

    sys.exit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
