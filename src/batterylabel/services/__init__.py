"""
Services - background work feeding the battery state.
"""

from .power import BatteryPollingService, read_host_battery

__all__ = ["BatteryPollingService", "read_host_battery"]
