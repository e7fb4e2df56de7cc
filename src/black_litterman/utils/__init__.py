"""
Utils Package - Utility modules for the Black-Litterman model
Provides configuration management and logging setup.

File: __init__.py
Modified: 2025-07-15
"""

from .config import Config
from .logger import setup_logger

__all__ = ['Config', 'setup_logger']
