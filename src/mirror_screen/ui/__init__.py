"""Terminal presentation for the mirror screen."""

from .models import ScreenState, StatusLine
from .screen import MirrorScreen

__all__ = ["MirrorScreen", "ScreenState", "StatusLine"]
