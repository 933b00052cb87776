"""
HTS App - Trade Code Submission and Analysis Engine

Validates harmonized tariff classification codes, forwards them with their
description to a downstream webhook, and aggregates recorded trade
observations into monthly summaries for presentation.
"""

__version__ = "0.1.0"
__author__ = "HTS Team"
