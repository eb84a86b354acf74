# =============================================================================
# main.py  —  Entry Point for the Vertex AI RAG Corpus Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                       # interactive
#   uv run python main.py "List all corpora."   # one message, then exit
#
# WHAT HAPPENS:
#   1. Loads .env (GOOGLE_CLOUD_PROJECT, GOOGLE_CLOUD_LOCATION, ...)
#   2. Creates the Google ADK agent (agent/rag_agent.py)
#   3. Creates ONE session; the current corpus lives in its state
#   4. Sends each user message and streams the agent's events
#   5. Prints tool calls, corpus listings and the final answer
# =============================================================================

import asyncio
import logging
import sys

from dotenv import load_dotenv

# Must run before the agent is built: settings and LiteLlm read the env.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.rag_agent import create_agent

APP_NAME = "rag_agent"
USER_ID = "demo_user"


def print_corpora(response: dict) -> None:
    """Pretty-print a list_corpora response."""
    print(f"  Status:  {response.get('status')}")
    print(f"  Message: {response.get('message')}")
    print("  Corpora:")
    for corpus in response.get("corpora", []):
        name = corpus.get("display_name") or "<no-name>"
        resource = corpus.get("resource_name") or "<no-resource>"
        created = corpus.get("create_time", "")
        print(f"   - {name} ({resource}) created: {created}")


async def send(runner: Runner, session_id: str, text: str) -> str:
    """Send one user message and return the agent's final text."""
    user_message = types.Content(role="user", parts=[types.Part(text=text)])
    final_response = ""

    async for event in runner.run_async(
        user_id=USER_ID,
        session_id=session_id,
        new_message=user_message,
    ):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if part.text:
                final_response = part.text
            if part.function_call:
                print(f"  🔧 Calling tool: {part.function_call.name}")
            if part.function_response and part.function_response.name == "list_corpora":
                print_corpora(part.function_response.response or {})

    return final_response


async def run_agent(initial_message: str = "") -> None:
    """Run the RAG corpus agent, interactively or for a single message."""
    print("=" * 70)
    print("  VERTEX AI RAG CORPUS AGENT")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)
    print("✅ Agent initialized and ready!\n")

    if initial_message:
        answer = await send(runner, session.id, initial_message)
        print(f"\n🤖 Agent:\n\n{answer or '⚠️  No response generated.'}")
        return

    print("💬 Ask about your corpora (type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break
        if not user_input:
            continue

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)
        answer = await send(runner, session.id, user_input)

        print("-" * 70)
        if answer:
            print(f"\n🤖 Agent:\n\n{answer}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")
        print("\n" + "=" * 70)


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(name)s %(message)s")
    asyncio.run(run_agent(" ".join(sys.argv[1:])))
