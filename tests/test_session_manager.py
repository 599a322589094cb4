import asyncio
import signal

import pytest

from sirc_core.client.display_events import DisplayKind
from sirc_core.server_state import ConnectionState
from sirc import normalize_startup_command


async def drain(connection, server):
    """Feeds EOF and waits until the listener has consumed every queued line."""
    connection.feed_eof()
    await asyncio.wait_for(server.listener_task, timeout=2)


@pytest.mark.asyncio
async def test_ping_is_answered_before_parsing(connected):
    manager, server, connection = connected
    manager.ui.reset()
    await manager.handle_incoming(server, "PING :irc.test")
    assert connection.sent == ["PONG :irc.test"]
    assert manager.ui.events == []


@pytest.mark.asyncio
async def test_ping_replacement_only_touches_first_occurrence(connected):
    manager, server, connection = connected
    await manager.handle_incoming(server, "PING PING")
    assert connection.sent == ["PONG PING"]


@pytest.mark.asyncio
async def test_end_to_end_join_and_names(connected):
    manager, server, connection = connected
    connection.feed(
        ":bob!b@h JOIN #test",
        ":alice!a@h JOIN #test",
        ":irc.test 353 alice = #test :alice @bob",
        ":irc.test 366 alice #test :End of /NAMES list.",
    )
    await drain(connection, server)

    channel = server.context_manager.get_channel("#test")
    assert channel is not None
    assert server.active_channel is channel
    assert channel.present_members() == ["alice", "bob"]

    await manager.dispatch("nicks", "#test")
    assert manager.ui.texts()[-1] == "alice bob"


@pytest.mark.asyncio
async def test_join_by_other_first_leaves_no_channel(connected):
    manager, server, connection = connected
    connection.feed(":bob!b@h JOIN #test")
    await drain(connection, server)
    assert server.channels == {}


@pytest.mark.asyncio
async def test_listener_pongs_from_the_wire(connected):
    manager, server, connection = connected
    connection.feed("PING :keepalive-1", ":irc.test 001 alice :Welcome")
    await drain(connection, server)
    assert connection.sent == ["PONG :keepalive-1"]


@pytest.mark.asyncio
async def test_eof_ends_listener_and_reports(connected):
    manager, server, connection = connected
    await drain(connection, server)
    assert server.state == ConnectionState.DISCONNECTED
    last = manager.ui.events[-1]
    assert last.kind == DisplayKind.SEMANTIC and last.color_key == "error"
    assert "Disconnected from irc.test:6667" in last.text
    # The server stays listed; commands needing the wire now fail cleanly.
    assert manager.servers == [server]
    assert not await manager.process_user_line("/join #test")


@pytest.mark.asyncio
async def test_eof_on_one_server_leaves_others_running(manager, connections):
    await manager.dispatch("server", "irc.one.test")
    await manager.dispatch("server", "irc.two.test")
    first, second = manager.servers
    await drain(connections[0], first)
    assert first.state == ConnectionState.DISCONNECTED
    assert second.connected
    assert not second.listener_task.done()


@pytest.mark.asyncio
async def test_process_user_line_routes_commands_and_text(connected):
    manager, server, connection = connected
    await manager.handle_incoming(server, ":alice!a@h JOIN #test")
    assert await manager.process_user_line("/msg bob hello")
    assert await manager.process_user_line("plain text")
    assert connection.sent == ["PRIVMSG bob :hello", "PRIVMSG #test :plain text"]


@pytest.mark.asyncio
async def test_process_user_line_renders_errors(manager):
    assert not await manager.process_user_line("/bogus")
    event = manager.ui.events[-1]
    assert event.color_key == "error"
    assert event.text == "Unknown command: bogus"

    assert not await manager.process_user_line("hello")
    assert manager.ui.events[-1].text == "Not connected to any server."


@pytest.mark.asyncio
async def test_process_user_line_ignores_blank_input(manager):
    assert not await manager.process_user_line("   ")
    assert manager.ui.events == []


@pytest.mark.asyncio
async def test_unexpected_handler_error_is_rendered(connected, monkeypatch):
    manager, server, _ = connected

    async def broken_send(line):
        raise RuntimeError("wire on fire")

    monkeypatch.setattr(server, "send_raw", broken_send)
    assert not await manager.process_user_line("/away brb")
    assert manager.ui.events[-1].text == "Error in command /away: wire on fire"


@pytest.mark.asyncio
async def test_shutdown_is_idempotent(connected):
    manager, server, connection = connected
    await manager.request_shutdown("first")
    await manager.request_shutdown("second")
    assert connection.sent == ["QUIT :first"]
    assert connection.closed
    assert server.listener_task.done()


@pytest.mark.asyncio
async def test_termination_signal_quits_everywhere(connected):
    manager, _, connection = connected
    manager._handle_signal(signal.SIGTERM)
    await manager._signal_shutdown_task
    assert connection.sent == ["QUIT :Program terminated"]
    assert manager.should_quit.is_set()


@pytest.mark.asyncio
async def test_run_main_loop_runs_startup_commands_until_quit(manager, connections):
    await asyncio.wait_for(
        manager.run_main_loop(["/server irc.one.test", "/join #test", "/quit done"]),
        timeout=2,
    )
    assert connections[0].sent[-2:] == ["JOIN #test", "QUIT :done"]
    assert manager.should_quit.is_set()


@pytest.mark.parametrize(
    "arg, expected",
    [
        ("server irc.test", "/server irc.test"),
        ("/join #test", "/join #test"),
        ("  quit  ", "/quit"),
    ],
)
def test_normalize_startup_command(arg, expected):
    assert normalize_startup_command(arg) == expected
