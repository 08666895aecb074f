"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class AtmConfig(BaseSettings):
    """ATM simulator configuration"""
    
    # Store configuration
    data_file: str = "atm_data.txt"
    
    # Ledger rules
    max_transactions: int = 10  # Mini statement capacity
    pin_attempts: int = 3
    pin_length: int = 4
    
    # Initial state used when the store is missing or malformed
    default_balance: str = "1000.00"
    default_pin: str = "1234"
    
    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    
    class Config:
        env_prefix = "ATM_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = AtmConfig()


def get_config() -> AtmConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> AtmConfig:
    """Reload configuration from environment"""
    global config
    config = AtmConfig()
    return config
