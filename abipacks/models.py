"""Core data models shared across abipacks components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

DEFAULT_NETWORK = "ethereum"
DEFAULT_API_ROUTE = "api?module=contract&action=getabi&address="

RawAbiEntry = List[Dict[str, Any]]
Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class RateLimitPolicy:
    """Request budget for one explorer API."""

    rate: int = 5
    per_seconds: float = 1.0
    concurrent: int = 1

    @property
    def interval(self) -> float:
        """Minimum spacing, in seconds, between two request starts."""
        if self.rate <= 0:
            return 0.0
        return self.per_seconds / self.rate


@dataclass(frozen=True)
class NetworkConfig:
    """Explorer endpoint settings for a single network."""

    name: str
    base_url: str
    api_key: str = ""
    api_route: str = DEFAULT_API_ROUTE
    rate_limit: RateLimitPolicy = field(default_factory=RateLimitPolicy)

    def request_url(self, address: str) -> str:
        base = self.base_url.rstrip("/")
        return f"{base}/{self.api_route}{address}&apikey={self.api_key}"


@dataclass(frozen=True)
class TaggedAddress:
    """A deployed contract address on one network."""

    address: str
    network: str = DEFAULT_NETWORK
    tag: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"address": self.address, "network": self.network, "tag": self.tag}


@dataclass(frozen=True)
class ContractManifest:
    """Named, versioned description of a logical contract or app."""

    name: str
    version: str
    desc: str = ""
    website: str = ""
    priority: Optional[int] = None
    addresses: Tuple[TaggedAddress, ...] = ()
    # Unrecognised scalar keys, in file order; copied into pack metadata.
    extra: Tuple[Tuple[str, Scalar], ...] = ()

    @property
    def sort_priority(self) -> int:
        return self.priority if self.priority is not None else 0


@dataclass(frozen=True)
class NetworkGroup:
    """Addresses of one manifest that target the same network."""

    network: str
    addresses: Tuple[TaggedAddress, ...]


@dataclass(frozen=True)
class NetworkGroupedManifest:
    """A manifest with its addresses partitioned by network."""

    manifest: ContractManifest
    groups: Tuple[NetworkGroup, ...]

    @property
    def networks(self) -> List[str]:
        return [group.network for group in self.groups]


@dataclass(frozen=True)
class ParamDef:
    """One firmware-encoded function parameter."""

    name: str
    type_index: int
    is_array: bool = False
    array_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type_index,
            "isArray": self.is_array,
            "arraySz": self.array_size,
        }


@dataclass(frozen=True)
class NormalizedDef:
    """Firmware-consumable definition of a single ABI function or event."""

    name: str
    signature: str
    sig: str
    params: Tuple[ParamDef, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sig": self.sig,
            "signature": self.signature,
            "params": [param.to_dict() for param in self.params],
        }


@dataclass(frozen=True)
class PackMetadata:
    """Manifest fields annotated with the pack's network and address subset."""

    name: str
    version: str
    network: str
    desc: str = ""
    website: str = ""
    priority: Optional[int] = None
    addresses: Tuple[TaggedAddress, ...] = ()
    extra: Tuple[Tuple[str, Scalar], ...] = ()

    @property
    def sort_priority(self) -> int:
        return self.priority if self.priority is not None else 0

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "desc": self.desc,
            "version": self.version,
            "website": self.website,
        }
        if self.priority is not None:
            payload["priority"] = self.priority
        for key, value in self.extra:
            payload.setdefault(key, value)
        payload["addresses"] = [address.to_dict() for address in self.addresses]
        payload["network"] = self.network
        return payload


@dataclass(frozen=True)
class Pack:
    """Normalized definitions for one manifest on one network."""

    metadata: PackMetadata
    defs: Tuple[NormalizedDef, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "defs": [definition.to_dict() for definition in self.defs],
        }


@dataclass(frozen=True)
class IndexEntry:
    """Index record pointing at a written pack file."""

    metadata: PackMetadata
    fname: str

    def to_dict(self) -> Dict[str, Any]:
        payload = self.metadata.to_dict()
        payload["fname"] = self.fname
        return payload
