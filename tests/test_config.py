"""Tests for settings validation and loading."""
import pytest
import yaml
from pydantic import ValidationError

from feedgen.config import Settings, load_settings, parse_duration
from feedgen.data.profiles import FraudType


class TestParseDuration:
    @pytest.mark.parametrize("text,seconds", [
        ("0", 0.0),
        ("30s", 30.0),
        ("5m", 300.0),
        ("1h30m", 5400.0),
        ("250ms", 0.25),
        ("12.5", 12.5),
        (" 2M ", 120.0),
    ])
    def test_valid(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    def test_numbers_pass_through(self):
        assert parse_duration(45) == 45.0

    @pytest.mark.parametrize("text", ["", "abc", "5x", "5m garbage", "-3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_duration(text)


class TestSettings:
    def test_defaults(self, make_settings):
        settings = make_settings()

        assert settings.redis.host == "localhost"
        assert settings.redis.port == 6379
        assert settings.redis.stream == "trades:stream"
        assert settings.generate.tps == 100
        assert settings.generate.duration == 300.0
        assert settings.generate.fraud_rate == 0.05
        assert settings.generate.fraud_type == FraudType.ALL
        assert settings.generate.stats_interval == 10.0
        assert settings.profiles.hft_ratio == 0.20
        assert settings.profiles.regular_ratio == 0.70
        assert settings.profiles.casual_ratio == 0.10

    @pytest.mark.parametrize("tps", [0, 10001, -5])
    def test_tps_out_of_range(self, make_settings, tps):
        with pytest.raises(ValidationError):
            make_settings(generate={"tps": tps})

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_fraud_rate_out_of_range(self, make_settings, rate):
        with pytest.raises(ValidationError):
            make_settings(generate={"fraud_rate": rate})

    def test_boundary_values_accepted(self, make_settings):
        settings = make_settings(generate={"tps": 10000, "fraud_rate": 1.0, "duration": 0})
        assert settings.generate.tps == 10000
        assert settings.generate.duration == 0.0

    def test_ratios_must_sum_to_one(self, make_settings):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            make_settings(profiles={"hft_ratio": 0.5, "regular_ratio": 0.5, "casual_ratio": 0.5})

    def test_ratios_within_tolerance(self, make_settings):
        settings = make_settings(profiles={"hft_ratio": 0.333, "regular_ratio": 0.333, "casual_ratio": 0.333})
        assert settings.profiles.hft_ratio == 0.333

    def test_fraud_type_is_case_insensitive(self, make_settings):
        assert make_settings(generate={"fraud_type": "velocity"}).generate.fraud_type == FraudType.VELOCITY

    @pytest.mark.parametrize("fraud_type", ["NONE", "SPOOFING"])
    def test_fraud_type_rejected(self, make_settings, fraud_type):
        with pytest.raises(ValidationError):
            make_settings(generate={"fraud_type": fraud_type})

    def test_duration_strings(self, make_settings):
        settings = make_settings(generate={"duration": "2m", "stats_interval": "500ms"})
        assert settings.generate.duration == 120.0
        assert settings.generate.stats_interval == 0.5

    def test_zero_stats_interval_rejected(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(generate={"stats_interval": 0})

    def test_environment_variables(self, make_settings, monkeypatch):
        monkeypatch.setenv("FEED_GEN_GENERATE__TPS", "250")
        monkeypatch.setenv("FEED_GEN_REDIS__HOST", "redis.internal")

        settings = make_settings()
        assert settings.generate.tps == 250
        assert settings.redis.host == "redis.internal"
        assert settings.redis.address == "redis.internal:6379"


class TestLoadSettings:
    def test_without_config_file(self, make_settings):
        settings = load_settings()
        assert settings == Settings()

    def test_yaml_file_and_overrides(self, make_settings, tmp_path):
        config = tmp_path / "feed.yaml"
        config.write_text(yaml.safe_dump({
            "redis": {"host": "stream-host", "port": 6380},
            "generate": {"tps": 50, "duration": "1m", "fraud_type": "wash"},
        }))

        settings = load_settings(config, overrides={"generate": {"tps": 75}})

        assert settings.redis.host == "stream-host"
        assert settings.redis.port == 6380
        assert settings.generate.tps == 75
        assert settings.generate.duration == 60.0
        assert settings.generate.fraud_type == FraudType.WASH

    def test_default_config_file_in_cwd(self, make_settings, tmp_path):
        (tmp_path / ".feed-generator.yaml").write_text("generate:\n  fraud_rate: 0.25\n")
        assert load_settings().generate.fraud_rate == 0.25

    def test_config_file_beats_environment(self, make_settings, tmp_path, monkeypatch):
        monkeypatch.setenv("FEED_GEN_GENERATE__TPS", "250")
        config = tmp_path / "feed.yaml"
        config.write_text("generate:\n  tps: 40\n")

        assert load_settings(config).generate.tps == 40

    def test_missing_explicit_file(self, make_settings, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_non_mapping_file(self, make_settings, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_settings(config)

    def test_invalid_values_in_file(self, make_settings, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("profiles:\n  hft_ratio: 0.9\n")
        with pytest.raises(ValidationError):
            load_settings(config)
