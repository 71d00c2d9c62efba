"""Default configuration parameters for the trade-entry core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FormParams:
    """Trade-entry form parameters."""
    default_market: str = "stock"
    default_side: str = "Buy"
    dashboard_route: str = "/dashboard"    # Navigation target after success


@dataclass(frozen=True)
class StrategyParams:
    """Strategy association parameters."""
    load_limit: int = 100                  # Max active strategies per session
    active_only: bool = True


@dataclass(frozen=True)
class SyncParams:
    """Cross-view synchronization parameters."""
    event_channel: str = "tradeDataUpdated"
    storage_key: str = "tradeDataLastUpdated"
    simple_storage_key: str = "tradeDataLastUpdatedSimple"
    source: str = "TradeForm"
    action: str = "trade_created"


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    form: FormParams
    strategy: StrategyParams
    sync: SyncParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        form=FormParams(),
        strategy=StrategyParams(),
        sync=SyncParams(),
        logging=LoggingParams(),
    )
