"""
Configuration package for database and settings
"""
from .database import Database, ActivityLogger
from .settings import GateSettings, load_settings, get_settings

__all__ = [
    'Database',
    'ActivityLogger',
    'GateSettings',
    'load_settings',
    'get_settings'
]
