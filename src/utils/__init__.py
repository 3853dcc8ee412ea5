"""
Utility modules for the SSW freight bridge
"""
from .config_loader import SswConfig, load_ssw_config

__all__ = [
    'SswConfig',
    'load_ssw_config',
]
