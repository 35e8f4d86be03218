"""Pipeline orchestration for the build and list commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

import httpx

from .assembler import PackAssembler, build_index
from .config import BuilderConfig, load_config
from .fetcher import ExplorerFetcher
from .logging import get_logger
from .manifests import load_manifests
from .models import ContractManifest, IndexEntry, Pack
from .networks import NetworkRegistry
from .writer import PackWriter


@dataclass
class BuildOutcome:
    """Result of a pack build run."""

    packs: List[Pack]
    index: List[IndexEntry]
    written: List[Path] = field(default_factory=list)
    dry_run: bool = False


class Orchestrator:
    """Wires configuration, manifests, explorer access and output for a run.

    ``transport`` replaces the HTTP transport of the explorer client and
    ``environ`` replaces the process environment when API keys are resolved;
    both exist for tests and offline runs.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._transport = transport
        self._environ = environ
        self.logger = get_logger("orchestrator")

    def run_build(
        self,
        path: str,
        *,
        contracts_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
        dry_run: bool = False,
        emit_empty_packs: Optional[bool] = None,
    ) -> BuildOutcome:
        """Fetch, normalize and write every pack declared under ``path``."""
        config = self._load_config(path, contracts_dir=contracts_dir, output_dir=output_dir)
        if emit_empty_packs is not None:
            config.emit_empty_packs = emit_empty_packs
        self.logger.info("Starting build for %s", config.root)

        manifests = load_manifests(config.contracts_dir, default_network=config.default_network)
        self.logger.info("Loaded %d contract manifests", len(manifests))

        packs = asyncio.run(self._assemble(config, manifests))
        index = build_index(packs)

        if dry_run:
            self.logger.info("Dry run: %d packs assembled, nothing written", len(packs))
            return BuildOutcome(packs=packs, index=index, dry_run=True)

        writer = PackWriter(config.output_dir)
        written = writer.write_packs(packs)
        written.append(writer.write_index(index))
        return BuildOutcome(packs=packs, index=index, written=written)

    def run_list(self, path: str, *, contracts_dir: Optional[str] = None) -> List[ContractManifest]:
        config = self._load_config(path, contracts_dir=contracts_dir)
        return load_manifests(config.contracts_dir, default_network=config.default_network)

    async def _assemble(
        self, config: BuilderConfig, manifests: List[ContractManifest]
    ) -> List[Pack]:
        registry = NetworkRegistry.from_config(config)
        async with httpx.AsyncClient(transport=self._transport) as client:
            fetcher = ExplorerFetcher(registry, client, timeout=config.request_timeout)
            assembler = PackAssembler(
                fetcher,
                emit_empty_packs=config.emit_empty_packs,
                skip_read_only=config.skip_read_only,
            )
            return await assembler.assemble(manifests)

    def _load_config(
        self,
        path: str,
        *,
        contracts_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
    ) -> BuilderConfig:
        config = load_config(Path(path), environ=self._environ)
        if contracts_dir:
            config.contracts_dir = _resolve_against(config.root, contracts_dir)
        if output_dir:
            config.output_dir = _resolve_against(config.root, output_dir)
        return config


def _resolve_against(root: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else root / candidate


__all__ = ["BuildOutcome", "Orchestrator"]
