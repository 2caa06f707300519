import asyncio
import json

from typer.testing import CliRunner

import automate_gpt.persistence as persistence
from automate_gpt.cli import app
from automate_gpt.contracts import WorkflowResult
from automate_gpt.persistence import HistoryStore, InMemoryKeyValueStore

runner = CliRunner()


def _setup_store() -> InMemoryKeyValueStore:
    store = InMemoryKeyValueStore()
    persistence._store_instance = store
    return store


def test_workflow_list_shows_all_templates():
    result = runner.invoke(app, ["workflow", "list"])
    assert result.exit_code == 0, result.stdout
    for workflow_id in ("summarizer", "email_writer", "idea_expander", "task_creator", "custom_prompt"):
        assert workflow_id in result.stdout


def test_run_with_local_provider_records_history(monkeypatch):
    store = _setup_store()
    monkeypatch.setenv("AUTOMATE_GPT_PROVIDERS", "local")

    result = runner.invoke(app, ["run", "summarizer", "--text", "The team shipped the new billing system."])
    assert result.exit_code == 0, result.stdout
    assert "# Document Summary" in result.stdout

    history = asyncio.run(HistoryStore(store).get_history())
    assert len(history) == 1
    assert history[0].workflow_id == "summarizer"


def test_run_reads_input_file(monkeypatch, tmp_path):
    _setup_store()
    monkeypatch.setenv("AUTOMATE_GPT_PROVIDERS", "local")
    goal = tmp_path / "goal.txt"
    goal.write_text("Run a marathon next spring")

    result = runner.invoke(app, ["run", "task_creator", "--file", str(goal)])
    assert result.exit_code == 0, result.stdout
    assert "# Action Plan:" in result.stdout


def test_run_errors_exit_with_code_1(monkeypatch):
    _setup_store()
    monkeypatch.setenv("AUTOMATE_GPT_PROVIDERS", "local")

    blank = runner.invoke(app, ["run", "summarizer", "--text", "   "])
    assert blank.exit_code == 1
    assert "Please enter some text" in blank.stdout

    unknown = runner.invoke(app, ["run", "translator", "--text", "hola"])
    assert unknown.exit_code == 1
    assert "Unknown workflow" in unknown.stdout

    neither = runner.invoke(app, ["run", "summarizer"])
    assert neither.exit_code == 1


def test_run_reports_unavailable_providers():
    _setup_store()
    result = runner.invoke(app, ["run", "summarizer", "--text", "Some text"])
    assert result.exit_code == 1
    assert "All AI services are unavailable" in result.stdout


def test_history_list_export_and_clear(tmp_path):
    store = _setup_store()
    asyncio.run(
        HistoryStore(store).save_result(
            WorkflowResult(workflow_id="idea_expander", input="Solar kiosks", output="...", tokens=7)
        )
    )

    listed = runner.invoke(app, ["history", "list"])
    assert "idea_expander" in listed.stdout
    assert "Solar kiosks" in listed.stdout

    exported = runner.invoke(app, ["history", "export", "--output-dir", str(tmp_path)])
    assert exported.exit_code == 0, exported.stdout
    files = list(tmp_path.glob("automate-gpt-history-*.json"))
    assert len(files) == 1
    assert json.loads(files[0].read_text())["count"] == 1

    runner.invoke(app, ["history", "clear"])
    assert "No history found" in runner.invoke(app, ["history", "list"]).stdout


def test_settings_set_and_show():
    _setup_store()
    result = runner.invoke(app, ["settings", "set", "--model", "gpt-4", "--max-tokens", "2000"])
    assert result.exit_code == 0, result.stdout

    shown = runner.invoke(app, ["settings", "show"]).stdout
    assert "gpt-4" in shown
    assert "2000" in shown

    assert runner.invoke(app, ["settings", "set", "--max-tokens", "50"]).exit_code == 1
    assert runner.invoke(app, ["settings", "set", "--model", "llama"]).exit_code == 1


def test_account_lifecycle_namespaces_history(monkeypatch):
    store = _setup_store()
    monkeypatch.setenv("AUTOMATE_GPT_PROVIDERS", "local")

    signup = runner.invoke(
        app, ["account", "signup", "Ada", "ada@example.com", "--password", "Secret123"]
    )
    assert signup.exit_code == 0, signup.stdout
    assert "ada@example.com" in runner.invoke(app, ["account", "whoami"]).stdout

    runner.invoke(app, ["run", "custom_prompt", "--text", "Describe the ocean"])
    assert asyncio.run(HistoryStore(store).get_history()) == []

    runner.invoke(app, ["account", "signout"])
    assert "Not signed in" in runner.invoke(app, ["account", "whoami"]).stdout
    assert "No history found" in runner.invoke(app, ["history", "list"]).stdout

    bad = runner.invoke(app, ["account", "signin", "ada@example.com", "--password", "Wrong1234"])
    assert bad.exit_code == 1
    assert "Incorrect password" in bad.stdout

    good = runner.invoke(app, ["account", "signin", "ada@example.com", "--password", "Secret123"])
    assert good.exit_code == 0
    assert "Describe the ocean" in runner.invoke(app, ["history", "list"]).stdout


def test_account_reset_password():
    _setup_store()
    runner.invoke(app, ["account", "signup", "Ada", "ada@example.com", "--password", "Secret123"])

    reset = runner.invoke(
        app, ["account", "reset-password", "ada@example.com"], input="Fresh4567\nFresh4567\n"
    )
    assert reset.exit_code == 0, reset.stdout
    signin = runner.invoke(app, ["account", "signin", "ada@example.com", "--password", "Fresh4567"])
    assert signin.exit_code == 0
