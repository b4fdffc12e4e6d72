"""
Data models for the weather plugin

Contains the value types shared by the plugin, its services and the host.
"""

from .forecast import Forecast, SUMMARIES, MIN_TEMPERATURE_C, MAX_TEMPERATURE_C

__all__ = ['Forecast', 'SUMMARIES', 'MIN_TEMPERATURE_C', 'MAX_TEMPERATURE_C']
