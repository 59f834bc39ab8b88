"""Tests for the command-line entry point."""
import pytest

from feedgen import cli
from feedgen.cli import build_parser, main, overrides_from_args

from conftest import InMemorySink


@pytest.fixture
def no_signals(monkeypatch):
    monkeypatch.setattr(cli.signal, "signal", lambda *args: None)


class TestOverrides:
    def test_only_given_flags_are_overridden(self):
        args = build_parser().parse_args(["--tps", "50", "--duration", "1m", "--redis-host", "cache"])
        assert overrides_from_args(args) == {
            'redis': {'host': "cache"},
            'generate': {'tps': 50, 'duration': 60.0},
        }

    def test_no_flags_no_overrides(self):
        assert overrides_from_args(build_parser().parse_args([])) == {}

    def test_profile_and_boolean_flags(self):
        args = build_parser().parse_args([
            "-v", "--fraud-type", "wash", "--hft-ratio", "0.3",
            "--regular-ratio", "0.6", "--casual-ratio", "0.1",
        ])
        assert overrides_from_args(args) == {
            'generate': {'verbose': True, 'fraud_type': "wash"},
            'profiles': {'hft_ratio': 0.3, 'regular_ratio': 0.6, 'casual_ratio': 0.1},
        }

    def test_bad_duration_is_a_usage_error(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--duration", "soon"])


class TestMain:
    def test_invalid_configuration_exits_1(self, make_settings, no_signals):
        assert main(["--tps", "0"]) == 1

    def test_unreachable_sink_exits_1(self, make_settings, no_signals, monkeypatch):
        sink = InMemorySink(alive=False)
        sink.close = lambda: None
        monkeypatch.setattr(cli.RedisStreamSink, "from_settings", classmethod(lambda cls, s: sink))

        assert main(["--duration", "1s"]) == 1
        assert sink.attempts == 0

    def test_short_run(self, make_settings, no_signals, monkeypatch):
        sink = InMemorySink()
        closed = []
        sink.close = lambda: closed.append(True)
        monkeypatch.setattr(cli.RedisStreamSink, "from_settings", classmethod(lambda cls, s: sink))

        code = main(["--tps", "20", "--duration", "500ms", "--fraud-rate", "0", "--seed", "1"])

        assert code == 0
        assert 8 <= len(sink.trades) <= 11
        assert closed == [True]
