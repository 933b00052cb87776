"""
Data models and validation module.

Immutable records for submissions and trade observations, submission input
validation, and sanitizing of raw store rows before aggregation.
"""
