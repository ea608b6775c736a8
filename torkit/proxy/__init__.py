"""
Tor process supervision.
"""

from .readiness import BOOTSTRAPPED_MARKER, is_ready_line
from .tor import Tor, TorState

__all__ = ["BOOTSTRAPPED_MARKER", "is_ready_line", "Tor", "TorState"]
