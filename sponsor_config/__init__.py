"""
sponsor_config -- single public entrypoint for marketplace configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Services receive a frozen
    ``MarketplaceConfig`` and never read YAML files themselves.

Architecture position:
    Configuration -- YAML-driven settings, load-time validation.
    Sits above ``sponsor_kernel`` and below ``sponsor_services``.  The
    kernel and engines MUST NEVER import from ``sponsor_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Load-time validation: rates, day counts, currencies and plan ids are
      checked before a config is returned.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ValueError`` -- schema or range validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``MARKETPLACE_CONFIG_TRACE`` log entry with the source path, checksum,
    default commission rate and plan count.
"""

from __future__ import annotations

from pathlib import Path

from sponsor_config.loader import compute_checksum, load_marketplace_config
from sponsor_config.schema import MarketplaceConfig
from sponsor_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "marketplace.yaml"


def get_active_config(path: Path | None = None) -> MarketplaceConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Override path to a marketplace YAML file.  Defaults to
            sponsor_config/sets/marketplace.yaml.

    Returns:
        MarketplaceConfig -- frozen, validated settings.

    Raises:
        FileNotFoundError: If the YAML file does not exist.
        ValueError: If configuration validation fails.
    """
    source = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    config = load_marketplace_config(source)

    _logger.info(
        "MARKETPLACE_CONFIG_TRACE",
        extra={
            "trace_type": "MARKETPLACE_CONFIG_TRACE",
            "config_path": str(source),
            "checksum": config.checksum,
            "default_commission_rate": str(config.default_commission_rate),
            "default_currency": config.default_currency,
            "plan_count": len(config.pricing_plans),
        },
    )
    return config


__all__ = [
    "MarketplaceConfig",
    "compute_checksum",
    "get_active_config",
]
