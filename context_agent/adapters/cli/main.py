"""CLI JSON adapter — reads a message from argv/stdin, prints the AgentResponse as JSON."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys

from context_agent import create_agent
from context_agent.engine.models import AgentRequest
from context_agent.errors import ContextAgentError


async def run_cli(text: str, session_id: str = "cli-default") -> None:
    agent = create_agent()
    await agent.initialize()
    response = await agent.process_message(AgentRequest(message=text, session_id=session_id))
    print(json.dumps(response.model_dump(), indent=2), flush=True)


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING"), stream=sys.stderr)

    session_id = "cli-default"
    if len(sys.argv) > 1:
        text = " ".join(sys.argv[1:])
    else:
        raw = sys.stdin.read().strip()
        if not raw:
            print(
                "Usage: context-agent <text>  OR  "
                "echo '{\"message\":\"...\",\"session_id\":\"...\"}' | context-agent",
                file=sys.stderr,
            )
            sys.exit(1)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            text = raw
        else:
            if isinstance(data, dict):
                text = data.get("message", raw)
                session_id = data.get("session_id", session_id)
            else:
                text = raw

    try:
        asyncio.run(run_cli(text, session_id))
    except ContextAgentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
