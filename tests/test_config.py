"""
Tests for configuration and logging setup
"""

import json
import logging

from atm_ledger.config import AtmConfig, reload_config, get_config
from atm_ledger.logging_config import JSONFormatter, setup_logging, log_action


class TestConfig:
    """Test environment-based configuration"""
    
    def test_defaults(self, monkeypatch):
        """Test built-in defaults"""
        for name in ["ATM_DATA_FILE", "ATM_MAX_TRANSACTIONS", "ATM_PIN_ATTEMPTS", "ATM_DEFAULT_PIN"]:
            monkeypatch.delenv(name, raising=False)
        config = AtmConfig()
        assert config.data_file == "atm_data.txt"
        assert config.max_transactions == 10
        assert config.pin_attempts == 3
        assert config.pin_length == 4
        assert config.default_balance == "1000.00"
        assert config.default_pin == "1234"
    
    def test_environment_override(self, monkeypatch):
        """Test ATM_ prefixed variables override defaults"""
        monkeypatch.setenv("ATM_DATA_FILE", "/tmp/other.txt")
        monkeypatch.setenv("ATM_MAX_TRANSACTIONS", "5")
        config = reload_config()
        try:
            assert config.data_file == "/tmp/other.txt"
            assert config.max_transactions == 5
            assert get_config() is config
        finally:
            monkeypatch.delenv("ATM_DATA_FILE")
            monkeypatch.delenv("ATM_MAX_TRANSACTIONS")
            reload_config()


class TestLogging:
    """Test structured logging"""
    
    def test_json_formatter(self):
        """Test structured fields are emitted and None values dropped"""
        record = logging.LogRecord("atm_ledger", logging.INFO, __file__, 1, "Deposited 5.00", (), None)
        record.action = "deposit"
        entry = json.loads(JSONFormatter().format(record))
        
        assert entry["level"] == "INFO"
        assert entry["message"] == "Deposited 5.00"
        assert entry["action"] == "deposit"
        assert "resource" not in entry
    
    def test_log_action_to_file(self, tmp_path):
        """Test log_action writes structured records to a log file"""
        log_file = tmp_path / "atm.log"
        logger = setup_logging(level="INFO", logger_name="atm_ledger.test", log_file=str(log_file))
        
        log_action(logger, "info", "PIN changed", action="change_pin", resource="ledger",
                   extra={"attempts": 1})
        for handler in logger.handlers:
            handler.flush()
        
        entry = json.loads(log_file.read_text().strip())
        assert entry["action"] == "change_pin"
        assert entry["resource"] == "ledger"
        assert entry["extra"] == {"attempts": 1}
    
    def test_log_action_respects_level(self, tmp_path):
        """Test records below the logger level are dropped"""
        log_file = tmp_path / "atm.log"
        logger = setup_logging(level="WARNING", logger_name="atm_ledger.quiet",
                               log_format="text", log_file=str(log_file))
        
        log_action(logger, "info", "ignored")
        log_action(logger, "warning", "kept")
        for handler in logger.handlers:
            handler.flush()
        
        content = log_file.read_text()
        assert "ignored" not in content
        assert "WARNING atm_ledger.quiet: kept" in content
