"""
Restaurant Deals package.
Active deals by time of day and the peak deal window, with wrap-past-midnight hours.
"""

__version__ = "0.1.0"

from .windows import Window, contains
from .peak import PeakResult, peak
from .service import DealService
from .api import app

__all__ = [
    "Window",
    "contains",
    "PeakResult",
    "peak",
    "DealService",
    "app"
]
