"""Loading of contract manifests (JSON with comments) from disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import json5

from .logging import get_logger
from .models import DEFAULT_NETWORK, ContractManifest, Scalar, TaggedAddress

MANIFEST_SUFFIXES = (".json", ".jsonc", ".json5")
# "network" and "fname" are written by the builder and never taken from a manifest.
RESERVED_KEYS = frozenset(
    {"name", "version", "desc", "website", "priority", "addresses", "network", "fname"}
)

logger = get_logger("manifests")


class ManifestError(RuntimeError):
    """Raised when a manifest file cannot be parsed."""


def load_manifests(
    directory: Path, *, default_network: str = DEFAULT_NETWORK
) -> List[ContractManifest]:
    """Load every manifest file in ``directory``, sorted by file name.

    Addresses that name no network are assigned ``default_network``.
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        raise FileNotFoundError(f"Contracts directory not found: {directory}")
    manifests: List[ContractManifest] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() not in MANIFEST_SUFFIXES:
            continue
        manifest = load_manifest(path, default_network=default_network)
        if manifest is None:
            logger.warning("Skipping %s: manifest has no name", path.name)
            continue
        manifests.append(manifest)
    logger.debug("Loaded %d manifests from %s", len(manifests), directory)
    return manifests


def load_manifest(
    path: Path, *, default_network: str = DEFAULT_NETWORK
) -> Optional[ContractManifest]:
    try:
        data = json5.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ManifestError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{path.name} must contain an object at the root")
    return manifest_from_dict(data, default_network=default_network)


def manifest_from_dict(
    data: Dict[str, Any], *, default_network: str = DEFAULT_NETWORK
) -> Optional[ContractManifest]:
    name = _as_str(data.get("name"))
    if not name:
        return None
    raw_addresses = data.get("addresses")
    addresses = []
    if isinstance(raw_addresses, list):
        for item in raw_addresses:
            tagged = _tagged_address(item, default_network)
            if tagged is not None:
                addresses.append(tagged)
    return ContractManifest(
        name=name,
        version=_as_str(data.get("version")) or "",
        desc=_as_str(data.get("desc")) or "",
        website=_as_str(data.get("website")) or "",
        priority=_as_int(data.get("priority")),
        addresses=tuple(addresses),
        extra=_extra_scalars(data),
    )


def _tagged_address(item: Any, default_network: str) -> Optional[TaggedAddress]:
    if not isinstance(item, dict):
        return None
    address = _as_str(item.get("address"))
    if not address:
        return None
    return TaggedAddress(
        address=address.strip(),
        network=_as_str(item.get("network")) or default_network,
        tag=_as_str(item.get("tag")) or "",
    )


def _extra_scalars(data: Dict[str, Any]) -> Tuple[Tuple[str, Scalar], ...]:
    return tuple(
        (str(key), value)
        for key, value in data.items()
        if str(key) not in RESERVED_KEYS
        and (value is None or isinstance(value, (str, int, float, bool)))
    )


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = ["ManifestError", "load_manifest", "load_manifests", "manifest_from_dict"]
