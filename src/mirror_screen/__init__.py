"""Smart-mirror home screen: clock, holiday and a 12-hour NWS forecast."""

__version__ = "0.1.0"
