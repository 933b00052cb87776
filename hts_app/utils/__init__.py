"""
Utility functions module.

Clock helpers shared by payload construction and time-window selection.
All timestamps are produced in UTC.
"""
