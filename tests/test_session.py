# Tests for the launcher session and the console front end

import io
from unittest.mock import MagicMock

import pytest

from launcher_agent.cache.store import APPS_CACHE, CLIPBOARD_CACHE
from launcher_agent.catalog.models import Item, ItemType, SearchMode
from launcher_agent.catalog.modes import STATUS_NO_RESULTS, STATUS_SEARCHING
from launcher_agent.config import PROMPT
from launcher_agent.console import ConsoleFrontend
from launcher_agent.executor import ItemExecutor
from launcher_agent.ipc.messages import ReloadMessage
from launcher_agent.session import LauncherSession


APPS = [
    Item.application("Firefox", "/Applications/Firefox.app"),
    Item.application("Safari", "/Applications/Safari.app"),
]
SERDE = Item.rust_crate("serde v1.0.0 (↓ 1.5M)", "https://crates.io/crates/serde")

COMMANDS = '''
[[command]]
name = "Only Apps"
action = "launcher-agent --apps -p 'Apps: '"

[[command]]
name = "Say Hi"
action = "say hi"
'''


@pytest.fixture
def commands_file(tmp_path):
    path = tmp_path / "commands.toml"
    path.write_text(COMMANDS)
    return str(path)


@pytest.fixture
def crates_search():
    return MagicMock(return_value=[SERDE])


@pytest.fixture
def session(store, commands_file, crates_search, clock):
    store.save(APPS_CACHE, APPS)
    store.save(CLIPBOARD_CACHE, [Item.clipboard_entry("copied text", "copied text")])
    return LauncherSession(
        ReloadMessage(apps=True, commands=True),
        store=store,
        executor=ItemExecutor(shell=MagicMock(), pasteboard=MagicMock()),
        remote_searches={SearchMode.CRATES_SEARCH: crates_search},
        commands_file=commands_file,
        debounce_interval=0.3,
        clock=clock,
    )


def select(session, name):
    session.set_query(name)
    assert session.selected.name == name


def test_initial_state(session):
    assert session.prompt == PROMPT
    assert session.query == ""
    assert session.mode is SearchMode.NORMAL
    assert [item.name for item in session.results[:3]] == ["Firefox", "Safari", "Only Apps"]


def test_cursor_is_clamped(session):
    session.set_query("fire")
    session.move_cursor(5)
    assert session.cursor == len(session.results) - 1
    session.move_cursor(-10)
    assert session.cursor == 0


def test_reload_resets_everything(session):
    session.set_query("Clipboard History")
    session.execute_selected()
    assert session.mode is SearchMode.CLIPBOARD_HISTORY

    session.set_query("copied")
    session.move_cursor(1)
    session.handle_reload(ReloadMessage(apps=True, prompt="Go: "))

    assert session.query == ""
    assert session.cursor == 0
    assert session.prompt == "Go: "
    assert session.mode is SearchMode.NORMAL
    assert session.results == APPS


def test_reload_without_prompt_keeps_current_prompt(session):
    session.handle_reload(ReloadMessage(apps=True, prompt="Go: "))
    session.handle_reload(ReloadMessage(apps=True))
    assert session.prompt == "Go: "


def test_tick_applies_queued_reloads(session):
    session.coordinator = MagicMock()
    session.coordinator.messages.return_value = [ReloadMessage(apps=True, prompt="Remote: ")]
    assert session.tick() is True
    assert session.prompt == "Remote: "
    assert session.results == APPS


def test_clipboard_mode_lists_persisted_history(session):
    select(session, "Clipboard History")
    outcome = session.execute_selected()
    assert outcome.exit is False
    assert [item.type for item in session.results] == [ItemType.CLIPBOARD_HISTORY]


def test_remote_mode_flow(session, clock, crates_search):
    select(session, "Search Crates")
    session.execute_selected()
    assert session.mode is SearchMode.CRATES_SEARCH
    assert session.results == []
    assert session.status is None

    session.set_query("serde")
    assert session.status == STATUS_SEARCHING
    assert session.tick() is False

    clock.advance(0.5)
    assert session.tick() is True
    crates_search.assert_called_once_with("serde")
    assert session.results == [SERDE]
    assert session.status is None

    crates_search.return_value = []
    session.set_query("zzzz")
    clock.advance(0.5)
    session.tick()
    assert session.status == STATUS_NO_RESULTS


def test_self_reload_command_applies_in_process(session):
    select(session, "Only Apps")
    outcome = session.execute_selected()
    assert outcome.exit is False
    assert session.prompt == "Apps: "
    assert session.results == APPS
    session.executor.shell.run_shell.assert_not_called()


def test_executing_an_app_exits(session):
    select(session, "Safari")
    outcome = session.execute_selected()
    assert outcome.exit is True
    session.executor.shell.open_path.assert_called_once_with("/Applications/Safari.app")


def test_nothing_selected(session):
    session.set_query("no item is called this")
    assert session.selected is None
    assert session.execute_selected() is None


def test_console_runs_queries_and_executes(session):
    stdin = io.StringIO("saf\n!1\n")
    stdout = io.StringIO()
    frontend = ConsoleFrontend(session, stdin=stdin, stdout=stdout, tick_interval=0.001)

    assert frontend.run() == 0
    session.executor.shell.open_path.assert_called_once_with("/Applications/Safari.app")
    assert "Safari" in stdout.getvalue()


def test_console_reports_missing_result(session):
    stdout = io.StringIO()
    frontend = ConsoleFrontend(session, stdin=io.StringIO(""), stdout=stdout, tick_interval=0.001)
    assert frontend.handle_line("!99") is True
    assert "No result 99" in stdout.getvalue()
