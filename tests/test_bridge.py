"""Tests for host-bridge delivery and the event log."""

import json
import logging

from minigames.services.bridge import HostBridge, encode_message
from minigames.utils.event_log import EventLog
from tests.helpers.fakes import RecordingTransport


class TestEncoding:

    def test_bare_event_name(self):
        assert encode_message("close_webview") == "close_webview"

    def test_envelope_with_data(self):
        assert json.loads(encode_message("rpg_level_up", {"level": 3})) == {
            "event": "rpg_level_up", "data": {"level": 3},
        }


class TestHostBridge:

    def test_delivers_to_transport(self):
        transport = RecordingTransport()
        bridge = HostBridge(transport, clock=lambda: 1234)
        event = bridge.emit("close_webview")
        assert transport.messages == ["close_webview"]
        assert event.delivered
        assert event.time_ms == 1234

    def test_without_transport_only_logs(self, caplog):
        bridge = HostBridge()
        with caplog.at_level(logging.INFO):
            event = bridge.emit("close_webview")
        assert not event.delivered
        assert "Host bridge not available" in caplog.text
        assert len(bridge.event_log) == 1

    def test_transport_failure_is_logged(self, caplog):
        def broken(message):
            raise ConnectionError("host went away")

        bridge = HostBridge(broken)
        with caplog.at_level(logging.ERROR):
            event = bridge.emit("snake_game_over", {"score": 30})
        assert not event.delivered
        assert "Error sending to host bridge" in caplog.text


class TestEventLog:

    def test_sequence_numbers(self):
        log = EventLog()
        first = log.append(0, "a", "a")
        second = log.append(5, "b", "b")
        assert (first.seq, second.seq) == (1, 2)
        assert [e.event for e in log.since(2)] == ["b"]

    def test_bounded(self):
        log = EventLog(maxlen=3)
        for i in range(5):
            log.append(i, f"e{i}", f"e{i}")
        assert len(log) == 3
        assert [e.seq for e in log.latest(10)] == [3, 4, 5]

    def test_clear(self):
        log = EventLog()
        log.append(0, "a", "a")
        log.clear()
        assert len(log) == 0
