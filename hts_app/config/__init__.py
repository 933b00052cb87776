"""
Configuration module.

Frozen dataclass defaults, YAML/environment loading with layered precedence,
and parameter validation.
"""
