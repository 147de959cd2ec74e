"""
Config Module - Black Box Interface

Purpose: Session cache configuration
Interface: RauthConfig, EnvConfigProvider.get_rauth_config()
Hidden: Environment variable names and parsing

Can be replaced with any provider returning a RauthConfig.
"""

from .provider import ConfigProvider, EnvConfigProvider, RauthConfig

__all__ = ["ConfigProvider", "EnvConfigProvider", "RauthConfig"]
