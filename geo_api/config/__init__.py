"""
Configuration Package
"""

from .app_config import Config, TestingConfig, DEFAULT_SECRET_KEY

__all__ = ['Config', 'TestingConfig', 'DEFAULT_SECRET_KEY']
