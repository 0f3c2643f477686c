"""
Tests for configuration and logging setup.
"""

import logging

import pytest

from binpack_bp.config import BinPackConfig, configure_logging


class TestBinPackConfig:
    """Tests for BinPackConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BINPACK_BP_LOG_LEVEL", raising=False)
        cfg = BinPackConfig()

        assert cfg.log_level == "INFO"
        assert cfg.num_threads == 1
        assert cfg.tolerance == 1e-6
        assert cfg.objective_scale == 1.0
        assert cfg.time_limit is None
        assert cfg.verbosity == 0

    def test_environment_override(self, monkeypatch):
        """Test the BINPACK_BP_LOG_LEVEL environment variable."""
        monkeypatch.setenv("BINPACK_BP_LOG_LEVEL", "debug")
        cfg = BinPackConfig()

        assert cfg.log_level == "DEBUG"

    def test_explicit_level_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("BINPACK_BP_LOG_LEVEL", "debug")
        assert BinPackConfig(log_level="WARNING").log_level == "WARNING"

    @pytest.mark.parametrize("kwargs", [
        {"num_threads": 0},
        {"tolerance": 0.0},
        {"objective_scale": -1.0},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            BinPackConfig(**kwargs)

    def test_dict_round_trip(self):
        cfg = BinPackConfig(num_threads=2, time_limit=30.0, tolerance=1e-7,
                            objective_scale=100.0, random_seed=5)
        restored = BinPackConfig.from_dict(cfg.to_dict())
        assert restored == cfg

    def test_save_and_load(self, tmp_path):
        """Test the TOML file written by save() is read back by load()."""
        path = tmp_path / "binpack_bp.toml"
        cfg = BinPackConfig(log_level="WARNING", verbosity=1,
                            time_limit=12.5, objective_scale=1000.0)
        cfg.save(path)

        text = path.read_text()
        assert "[solver]" in text
        assert "time_limit = 12.5" in text

        loaded = BinPackConfig.load(path)
        assert loaded == cfg

    def test_load_missing_file_gives_defaults(self, tmp_path):
        loaded = BinPackConfig.load(tmp_path / "missing.toml")
        assert loaded.num_threads == 1


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_returns_package_logger(self):
        logger = configure_logging(logging.WARNING)
        assert logger.name == "binpack_bp"
        assert logging.getLogger().level == logging.WARNING

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = configure_logging("INFO", log_file)
        logger.info("node solved")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "node solved" in log_file.read_text()
        configure_logging(logging.WARNING)
