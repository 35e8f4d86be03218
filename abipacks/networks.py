"""Registry of explorer networks and their rate limiters."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping

from .config import BuilderConfig, ConfigError
from .models import DEFAULT_NETWORK, NetworkConfig
from .throttle import RateLimiter


class NetworkRegistry:
    """Resolves network ids to explorer settings.

    Unknown ids resolve to the default network instead of failing. Each
    configured network owns exactly one :class:`RateLimiter`, shared by every
    fetch that targets it.
    """

    def __init__(
        self,
        networks: Mapping[str, NetworkConfig],
        *,
        default_network: str = DEFAULT_NETWORK,
    ) -> None:
        if default_network not in networks:
            raise ConfigError(f"Default network '{default_network}' is not configured")
        self._networks: Dict[str, NetworkConfig] = dict(networks)
        self.default_network = default_network
        self._limiters: Dict[str, RateLimiter] = {
            name: RateLimiter(config.rate_limit) for name, config in self._networks.items()
        }

    @classmethod
    def from_config(cls, config: BuilderConfig) -> "NetworkRegistry":
        return cls(config.networks, default_network=config.default_network)

    def resolve(self, network_id: str) -> NetworkConfig:
        return self._networks[self._key(network_id)]

    def limiter(self, network_id: str) -> RateLimiter:
        return self._limiters[self._key(network_id)]

    def _key(self, network_id: str) -> str:
        return network_id if network_id in self._networks else self.default_network

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._networks

    def __iter__(self) -> Iterator[str]:
        return iter(self._networks)


__all__ = ["NetworkRegistry"]
