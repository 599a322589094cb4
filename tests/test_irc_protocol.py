from datetime import datetime, timedelta

import pytest

from sirc_core.client.display_events import DisplayKind
from sirc_core.irc.irc_message import IRCMessage
from sirc_core.irc.irc_protocol import handle_server_message


def feed(server, line, record=True, scope=None):
    return handle_server_message(server, IRCMessage.parse(line), line, record=record, scope=scope)


def texts(events):
    return [event.text for event in events]


def join_self(server, channel="#test"):
    return feed(server, f":alice!a@h JOIN {channel}")


def test_empty_line_is_a_no_op(server):
    assert handle_server_message(server, IRCMessage.parse("")) == ("", [])


def test_self_join_creates_and_activates_channel(server):
    channel_name, events = join_self(server)
    assert "#test" in server.channels
    assert server.active_channel.name == "#test"
    assert events[0].kind == DisplayKind.CLEAR
    assert texts(events)[1] == "alice (alice!a@h) has joined #test"
    assert server.channels["#test"].is_present("alice")
    assert channel_name == "#test"
    assert list(server.channels["#test"].log) == [":alice!a@h JOIN #test"]


def test_join_by_other_does_not_create_channel(server):
    channel_name, events = feed(server, ":bob!b@h JOIN #test")
    assert server.channels == {}
    assert server.active_channel is None
    assert events == []
    assert channel_name == ""


def test_join_by_other_marks_present(server):
    join_self(server)
    _, events = feed(server, ":bob!b@h JOIN #test")
    assert server.channels["#test"].is_present("bob")
    assert texts(events) == ["bob (bob!b@h) has joined #test"]


def test_join_to_inactive_channel_is_silent(server):
    join_self(server, "#a")
    join_self(server, "#b")
    _, events = feed(server, ":bob!b@h JOIN #a")
    assert events == []
    assert server.channels["#a"].is_present("bob")


def test_join_and_part_lifecycle(server):
    for channel in ("#one", "#two", "#one"):
        join_self(server, channel)
        assert channel in server.channels
        assert server.active_channel.name == channel
        feed(server, f":alice!a@h PART {channel}")
        assert channel not in server.channels
    assert server.active_channel is None


def test_part_by_other(server):
    join_self(server)
    feed(server, ":bob!b@h JOIN #test")
    _, events = feed(server, ":bob!b@h PART #test :see you")
    assert not server.channels["#test"].is_present("bob")
    assert "bob" in server.channels["#test"].members
    assert texts(events) == ["bob (bob!b@h) has left #test (see you)"]
    assert events[0].color_key == "join_part"


def test_self_part_reselects_most_recently_active(server):
    join_self(server, "#a")
    join_self(server, "#b")
    join_self(server, "#c")
    now = datetime.now()
    server.channels["#a"].last_active_at = now - timedelta(minutes=2)
    server.channels["#b"].last_active_at = now - timedelta(minutes=1)

    _, events = feed(server, ":alice!a@h PART #c")

    assert "#c" not in server.channels
    assert server.active_channel.name == "#b"
    assert "Now talking in #b" in texts(events)


def test_self_part_of_inactive_channel_keeps_active(server):
    join_self(server, "#a")
    join_self(server, "#b")
    feed(server, ":alice!a@h PART #a")
    assert "#a" not in server.channels
    assert server.active_channel.name == "#b"


def test_privmsg_to_active_channel_is_shown_and_logged(server):
    join_self(server)
    line = ":bob!b@h PRIVMSG #test :hello there"
    channel_name, events = feed(server, line)
    assert channel_name == "#test"
    assert [(e.kind, e.text) for e in events] == [(DisplayKind.NOTE, "<bob> hello there")]
    assert server.channels["#test"].log[-1] == line


def test_privmsg_to_inactive_channel_is_logged_not_shown(server):
    join_self(server, "#a")
    join_self(server, "#b")
    line = ":bob!b@h PRIVMSG #a :psst"
    _, events = feed(server, line)
    assert events == []
    assert server.channels["#a"].log[-1] == line


def test_private_message_always_shown(server):
    _, events = feed(server, ":bob!b@h PRIVMSG alice :hi alice")
    assert [(e.kind, e.text) for e in events] == [(DisplayKind.PRIVATE, "<bob> hi alice")]


def test_ctcp_action_formatting(server):
    join_self(server)
    _, events = feed(server, ":bob!b@h PRIVMSG #test :\x01ACTION waves\x01")
    assert texts(events) == ["* bob waves"]


def test_quit_marks_absent_in_every_channel(server):
    join_self(server, "#a")
    join_self(server, "#b")
    feed(server, ":bob!b@h JOIN #a")
    feed(server, ":bob!b@h JOIN #b")

    _, events = feed(server, ":bob!b@h QUIT :gone fishing")

    assert not server.channels["#a"].is_present("bob")
    assert not server.channels["#b"].is_present("bob")
    assert texts(events) == ["bob (bob!b@h) has quit (gone fishing)"]


def test_quit_of_member_outside_active_channel_is_silent(server):
    join_self(server, "#a")
    feed(server, ":bob!b@h JOIN #a")
    join_self(server, "#b")
    _, events = feed(server, ":bob!b@h QUIT :bye")
    assert events == []
    assert not server.channels["#a"].is_present("bob")


def test_own_nick_change(server):
    join_self(server)
    _, events = feed(server, ":alice!a@h NICK alicia")
    assert server.nickname == "alicia"
    assert texts(events) == ["You are now known as alicia"]
    channel = server.channels["#test"]
    assert channel.is_present("alicia")
    assert not channel.is_present("alice")


def test_other_nick_change_noted_for_active_channel_only(server):
    join_self(server, "#a")
    feed(server, ":bob!b@h JOIN #a")
    join_self(server, "#b")
    feed(server, ":bob!b@h JOIN #b")
    _, events = feed(server, ":bob!b@h NICK robert")
    assert texts(events) == ["bob is now known as robert"]
    for name in ("#a", "#b"):
        assert server.channels[name].is_present("robert")
        assert not server.channels[name].is_present("bob")


def test_kick_of_other(server):
    join_self(server)
    feed(server, ":bob!b@h JOIN #test")
    _, events = feed(server, ":op!o@h KICK #test bob :behave")
    assert texts(events) == ["bob was kicked from #test by op (behave)"]
    assert events[0].color_key == "kick"
    assert not server.channels["#test"].is_present("bob")
    assert "#test" in server.channels


def test_kick_of_self_drops_channel_and_reselects(server):
    join_self(server, "#a")
    join_self(server, "#b")
    _, events = feed(server, ":op!o@h KICK #b alice")
    assert texts(events)[0] == "You were kicked from #b by op (No reason given)"
    assert "#b" not in server.channels
    assert server.active_channel.name == "#a"


def test_names_reply_marks_members_and_strips_prefixes(server):
    join_self(server)
    _, events = feed(server, ":irc.test 353 alice = #test :alice @bob +carol")
    assert events == []
    assert server.channels["#test"].present_members() == ["alice", "bob", "carol"]


def test_names_reply_for_unknown_channel_creates_nothing(server):
    feed(server, ":irc.test 353 alice = #test :alice @bob")
    assert server.channels == {}


@pytest.mark.parametrize("code", ["366", "375", "372", "376"])
def test_silent_numerics(server, code):
    join_self(server)
    _, events = feed(server, f":irc.test {code} alice #test :whatever")
    assert events == []


def test_welcome_adopts_assigned_nick(server):
    _, events = feed(server, ":irc.test 001 alice_ :Welcome to the network")
    assert server.nickname == "alice_"
    assert texts(events) == ["Welcome to irc.test: Welcome to the network"]


def test_unknown_numeric_becomes_note(server):
    _, events = feed(server, ":irc.test 251 alice :There are 3 users")
    assert texts(events) == ["There are 3 users"]


def test_unknown_command_becomes_note(server):
    _, events = feed(server, ":irc.test NOTICE * :*** Looking up your hostname")
    assert texts(events) == ["* *** Looking up your hostname"]


def test_raw_line_logged_against_first_param_channel(server):
    join_self(server)
    line = ":irc.test NOTICE #test :channel notice"
    channel_name, _ = feed(server, line)
    assert channel_name == "#test"
    assert server.channels["#test"].log[-1] == line


def test_replay_reproduces_membership_without_relogging(server):
    join_self(server)
    lines = [
        ":bob!b@h JOIN #test",
        ":carol!c@h JOIN #test",
        ":bob!b@h PRIVMSG #test :hi",
        ":carol!c@h PART #test",
        ":bob!b@h NICK bobby",
        ":dave!d@h JOIN #test",
        ":dave!d@h QUIT :gone",
    ]
    for line in lines:
        feed(server, line)
    channel = server.channels["#test"]
    live_members = dict(channel.members)
    log_before = list(channel.log)
    assert sorted(channel.present_members()) == ["alice", "bobby"]

    for line in log_before:
        feed(server, line, record=False, scope="#test")

    assert channel.members == live_members
    assert list(channel.log) == log_before
    assert server.active_channel is channel
    assert sorted(channel.present_members()) == ["alice", "bobby"]


def test_quit_and_nick_logged_to_channels_holding_the_member(server):
    join_self(server, "#a")
    join_self(server, "#b")
    feed(server, ":bob!b@h JOIN #a")
    feed(server, ":carol!c@h JOIN #b")

    feed(server, ":bob!b@h NICK robert")
    channel_name, _ = feed(server, ":carol!c@h QUIT :bye")

    assert ":bob!b@h NICK robert" in server.channels["#a"].log
    assert ":bob!b@h NICK robert" not in server.channels["#b"].log
    assert ":carol!c@h QUIT :bye" in server.channels["#b"].log
    assert ":carol!c@h QUIT :bye" not in server.channels["#a"].log
    assert channel_name == "#b"


def test_quit_of_unknown_nick_is_not_logged(server):
    join_self(server)
    channel_name, events = feed(server, ":zed!z@h QUIT :bye")
    assert channel_name == ""
    assert events == []
    assert list(server.channels["#test"].log) == [":alice!a@h JOIN #test"]


def test_quit_replay_is_limited_to_the_replayed_channel(server):
    join_self(server, "#a")
    join_self(server, "#b")
    feed(server, ":bob!b@h JOIN #a")
    feed(server, ":bob!b@h JOIN #b")
    feed(server, ":bob!b@h QUIT :brb")
    feed(server, ":bob!b@h JOIN #b")
    assert server.channels["#b"].is_present("bob")

    for line in list(server.channels["#a"].log):
        feed(server, line, record=False, scope="#a")

    assert not server.channels["#a"].is_present("bob")
    assert server.channels["#b"].is_present("bob")


def test_replay_after_own_nick_change(server):
    join_self(server)
    feed(server, ":bob!b@h JOIN #test")
    feed(server, ":alice!a@h NICK alicia")
    channel = server.channels["#test"]
    log_before = list(channel.log)

    for line in log_before:
        feed(server, line, record=False, scope="#test")

    assert server.nickname == "alicia"
    assert sorted(channel.present_members()) == ["alicia", "bob"]
    assert list(channel.log) == log_before
