"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: EnvConfigProvider, ConfigProvider protocol, config dataclasses
Hidden: Environment parsing, defaults

Can be replaced with any provider implementing ConfigProvider.
"""

from .provider import APIConfig, ConfigProvider, EnvConfigProvider, SessionConfig, StorageConfig

__all__ = ["APIConfig", "ConfigProvider", "EnvConfigProvider", "SessionConfig", "StorageConfig"]
