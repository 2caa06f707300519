"""Example running a workflow with the configured provider chain.

Set OPENAI_API_KEY and/or HF_API_TOKEN, or run fully offline with
AUTOMATE_GPT_PROVIDERS=local.
"""

import asyncio
import sys

from automate_gpt import AllProvidersUnavailable, create_executor


async def main():
    workflow_id = sys.argv[1] if len(sys.argv) > 1 else "summarizer"
    text = sys.argv[2] if len(sys.argv) > 2 else (
        "Remote work has changed how teams communicate. Meetings moved online, "
        "documentation became more important, and flexible hours are now common."
    )

    executor = create_executor()
    try:
        result = await executor.run(workflow_id, text)
    except AllProvidersUnavailable as exc:
        print(f"{exc} ({exc.cause})")
        return
    finally:
        await executor.aclose()

    print(result.output)
    print(f"\n{result.tokens} tokens, stored as {result.id}")


if __name__ == "__main__":
    asyncio.run(main())
