"""
Summary tables for power simulation results
"""

from .summary import summarize_power, cumulative_detection_table

__all__ = ['summarize_power', 'cumulative_detection_table']
