#!/usr/bin/env python3
"""
Configuration management for the PawMatch web application.
"""

import os
from pathlib import Path
from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads from the YAML file named by PAWMATCH_CONFIG (default config.yaml)
    and applies environment variable overrides.

    Returns:
        AppConfig: The application configuration.
    """
    config_path = os.environ.get('PAWMATCH_CONFIG', str(get_project_root() / 'config.yaml'))
    return load_config(config_path)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent
