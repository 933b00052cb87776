"""Default configuration parameters for trade submission and analysis."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WebhookParams:
    """Downstream webhook dispatch parameters."""
    url: str = ""                                    # Endpoint receiving submissions
    max_attempts: int = 3                            # Total attempts, first included
    base_delay_ms: int = 1000                        # Linear backoff unit
    timeout_ms: int = 15000                          # Per-attempt deadline
    bypass_mode: bool = False                        # Skip network, echo payload
    headers: Optional[dict[str, str]] = None         # Extra request headers

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def backoff_seconds(self, attempt: int) -> float:
        """Delay to wait after failed attempt number `attempt` (1-based)."""
        return self.base_delay_ms * attempt / 1000.0


@dataclass(frozen=True)
class StoreParams:
    """Trade data store parameters."""
    db_path: str = "trade_data.db"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class AnalysisParams:
    """Aggregation request parameters."""
    default_time_range: str = "current"
    default_direction: str = "Import"


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    webhook: WebhookParams
    store: StoreParams
    analysis: AnalysisParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        webhook=WebhookParams(),
        store=StoreParams(),
        analysis=AnalysisParams(),
    )
