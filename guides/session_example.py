"""Example of a signed-in session switching between workflows."""

import asyncio
import os

from automate_gpt import WorkflowSession, create_executor, get_store
from automate_gpt.auth import AccountStore
from automate_gpt.errors import DuplicateAccount


async def main():
    os.environ.setdefault("AUTOMATE_GPT_PROVIDERS", "local")
    store = get_store()
    accounts = AccountStore(store)
    try:
        user = await accounts.sign_up("Demo", "demo@example.com", "Demo12345")
    except DuplicateAccount:
        user = await accounts.sign_in("demo@example.com", "Demo12345")

    session = WorkflowSession(create_executor(store=store), user_id=user.id)
    session.select_workflow("task_creator")
    result = await session.submit("Organize a neighborhood cleanup day")
    print(result.output)

    history = await session.executor.history_store.get_history(user.id)
    print(f"\n{len(history)} result(s) in {user.email}'s history")


if __name__ == "__main__":
    asyncio.run(main())
