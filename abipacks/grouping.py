"""Partitioning of manifest addresses by target network."""

from __future__ import annotations

from typing import Dict, List

from .models import ContractManifest, NetworkGroup, NetworkGroupedManifest, TaggedAddress


def group_by_network(manifest: ContractManifest) -> NetworkGroupedManifest:
    """Split a manifest's addresses into one group per network.

    Groups appear in order of each network's first address, and addresses keep
    their manifest order inside a group.
    """
    buckets: Dict[str, List[TaggedAddress]] = {}
    for tagged in manifest.addresses:
        buckets.setdefault(tagged.network, []).append(tagged)
    groups = tuple(
        NetworkGroup(network=network, addresses=tuple(addresses))
        for network, addresses in buckets.items()
    )
    return NetworkGroupedManifest(manifest=manifest, groups=groups)


__all__ = ["group_by_network"]
