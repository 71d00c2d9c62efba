"""Configuration for cross-view broadcast channels."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class BroadcastMethod(Enum):
    """Supported trade update broadcast channels."""
    IN_PROCESS = "in_process"
    LOCAL_STORAGE = "local_storage"


@dataclass(frozen=True)
class InProcessChannelConfig:
    """Configuration for same-view event dispatch."""
    channel: str = "tradeDataUpdated"


@dataclass(frozen=True)
class StorageChannelConfig:
    """Configuration for shared key/value storage writes."""
    storage_key: str = "tradeDataLastUpdated"
    simple_storage_key: str = "tradeDataLastUpdatedSimple"
    backend: str = "memory"  # memory, file
    path: Optional[str] = None


@dataclass(frozen=True)
class BroadcastDestination:
    """Single broadcast channel destination."""
    name: str
    method: BroadcastMethod
    config: Any  # InProcessChannelConfig | StorageChannelConfig
    enabled: bool = True


@dataclass(frozen=True)
class BroadcastConfig:
    """Complete broadcast configuration."""
    destinations: list[BroadcastDestination]
    enabled: bool = True
    source: str = "TradeForm"


def get_default_broadcast_config(
    channel: str = "tradeDataUpdated",
    storage_key: str = "tradeDataLastUpdated",
    simple_storage_key: str = "tradeDataLastUpdatedSimple",
    source: str = "TradeForm",
) -> BroadcastConfig:
    """Get default broadcast configuration: both channels, in-memory storage."""
    return BroadcastConfig(
        destinations=[
            BroadcastDestination(
                name="in_process",
                method=BroadcastMethod.IN_PROCESS,
                config=InProcessChannelConfig(channel=channel),
            ),
            BroadcastDestination(
                name="local_storage",
                method=BroadcastMethod.LOCAL_STORAGE,
                config=StorageChannelConfig(
                    storage_key=storage_key,
                    simple_storage_key=simple_storage_key,
                ),
            ),
        ],
        enabled=True,
        source=source,
    )


def create_file_storage_destination(
    name: str,
    path: str,
    storage_key: str = "tradeDataLastUpdated",
    simple_storage_key: str = "tradeDataLastUpdatedSimple",
    enabled: bool = True,
) -> BroadcastDestination:
    """Create a storage destination backed by a shared JSON file."""
    return BroadcastDestination(
        name=name,
        method=BroadcastMethod.LOCAL_STORAGE,
        config=StorageChannelConfig(
            storage_key=storage_key,
            simple_storage_key=simple_storage_key,
            backend="file",
            path=path,
        ),
        enabled=enabled,
    )
