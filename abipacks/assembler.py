"""Pack assembly: fetch, normalize and aggregate definitions per network."""

from __future__ import annotations

import asyncio
import re
from typing import Iterable, List, Protocol, Sequence

from .abi import normalize
from .grouping import group_by_network
from .logging import get_logger
from .models import (
    ContractManifest,
    IndexEntry,
    NetworkGroup,
    NormalizedDef,
    Pack,
    PackMetadata,
    RawAbiEntry,
    TaggedAddress,
)

_WHITESPACE = re.compile(r"\s+")


class AbiSource(Protocol):
    """Anything that can resolve a tagged address to raw explorer ABI entries."""

    async def fetch(self, tagged: TaggedAddress) -> RawAbiEntry:
        ...


class PackAssembler:
    """Builds one pack per (manifest, network) from fetched ABIs."""

    def __init__(
        self,
        source: AbiSource,
        *,
        emit_empty_packs: bool = True,
        skip_read_only: bool = False,
    ) -> None:
        self.source = source
        self.emit_empty_packs = emit_empty_packs
        self.skip_read_only = skip_read_only
        self.logger = get_logger("assembler")

    async def assemble(self, manifests: Iterable[ContractManifest]) -> List[Pack]:
        """Assemble every manifest concurrently; output follows manifest order."""
        results = await asyncio.gather(
            *(self.assemble_manifest(manifest) for manifest in manifests)
        )
        return [pack for packs in results for pack in packs]

    async def assemble_manifest(self, manifest: ContractManifest) -> List[Pack]:
        grouped = group_by_network(manifest)
        results = await asyncio.gather(
            *(self._build_group(manifest, group) for group in grouped.groups)
        )
        packs: List[Pack] = []
        for pack in results:
            if not pack.defs and not self.emit_empty_packs:
                self.logger.warning(
                    "Skipping %s on %s: no definitions", manifest.name, pack.metadata.network
                )
                continue
            packs.append(pack)
        return packs

    async def _build_group(self, manifest: ContractManifest, group: NetworkGroup) -> Pack:
        # gather() keeps results aligned with group.addresses regardless of completion order.
        raw_results = await asyncio.gather(*(self.source.fetch(tagged) for tagged in group.addresses))
        defs: List[NormalizedDef] = []
        for raw in raw_results:
            defs.extend(normalize(raw, skip_read_only=self.skip_read_only))
        self.logger.debug(
            "%s on %s: %d addresses, %d defs",
            manifest.name,
            group.network,
            len(group.addresses),
            len(defs),
        )
        return Pack(metadata=build_metadata(manifest, group), defs=tuple(defs))


def build_metadata(manifest: ContractManifest, group: NetworkGroup) -> PackMetadata:
    return PackMetadata(
        name=manifest.name,
        version=manifest.version,
        network=group.network,
        desc=manifest.desc,
        website=manifest.website,
        priority=manifest.priority,
        addresses=group.addresses,
        extra=manifest.extra,
    )


def slugify(name: str) -> str:
    return _WHITESPACE.sub("_", name).lower()


def pack_file_name(pack: Pack) -> str:
    """File name shared by the written pack and its index entry."""
    metadata = pack.metadata
    return f"v{metadata.version}_{slugify(metadata.name)}_{metadata.network}.json"


def build_index(packs: Sequence[Pack]) -> List[IndexEntry]:
    """Index entries sorted by descending priority; ties keep pack order."""
    entries = [IndexEntry(metadata=pack.metadata, fname=pack_file_name(pack)) for pack in packs]
    return sorted(entries, key=lambda entry: entry.metadata.sort_priority, reverse=True)


__all__ = [
    "AbiSource",
    "PackAssembler",
    "build_index",
    "build_metadata",
    "pack_file_name",
    "slugify",
]
