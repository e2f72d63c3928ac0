#!/usr/bin/env python3
"""
Configuration Management
========================
Loads API keys from a .env file and the environment.
"""

import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from namekit.settings import get_setting


# =============================================================================
# Application Configuration
# =============================================================================

@dataclass
class Config:
    """Application configuration"""
    anthropic_api_key: Optional[str] = None
    anthropic_model: Optional[str] = None

    def __post_init__(self):
        if self.anthropic_model is None:
            self.anthropic_model = get_setting("ai.model")

    @property
    def has_anthropic(self) -> bool:
        return bool(self.anthropic_api_key)


def load_env(env_path: Path = None) -> dict:
    """Load environment variables from .env file."""
    if env_path is None:
        # Look for .env in the current working directory
        env_path = Path.cwd() / '.env'

    env_vars = {}
    if env_path.exists():
        for line in env_path.read_text().splitlines():
            line = line.strip()
            if '=' in line and not line.startswith('#'):
                key, value = line.split('=', 1)
                value = value.strip().strip('"').strip("'")
                env_vars[key.strip()] = value
                os.environ.setdefault(key.strip(), value)

    return env_vars


def get_config(env_path: Path = None) -> Config:
    """Get configuration from environment."""
    env = load_env(env_path)

    return Config(
        anthropic_api_key=env.get('ANTHROPIC_API_KEY') or os.environ.get('ANTHROPIC_API_KEY'),
        anthropic_model=env.get('NAMEKIT_MODEL') or os.environ.get('NAMEKIT_MODEL'),
    )


# Singleton config
_config = None

def config() -> Config:
    """Get the singleton config instance."""
    global _config
    if _config is None:
        _config = get_config()
    return _config


__all__ = [
    'Config',
    'load_env',
    'get_config',
    'config',
]
