"""
Configuration Loader (``sponsor_config.loader``).

Responsibility
--------------
Loads a marketplace YAML file and parses it into a frozen
``MarketplaceConfig``.  Services never call this directly; they receive the
config from ``sponsor_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required plan keys  -> ``KeyError`` propagates.
* Out-of-range values or bad numbers  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from sponsor_config.schema import MarketplaceConfig
from sponsor_kernel.domain.marketplace import BillingPeriod, PricingPlan
from sponsor_kernel.domain.values import to_decimal


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return data or {}


def _optional_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return to_decimal(value)


def parse_pricing_plan(data: dict[str, Any]) -> PricingPlan:
    """Parse one ``pricing_plans`` entry. ``price: custom`` means quote-only."""
    raw_price = data.get("price")
    price = None if raw_price in (None, "custom", "Custom") else to_decimal(raw_price)
    return PricingPlan(
        id=data["id"],
        name=data["name"],
        price=price,
        currency=str(data.get("currency", "USD")).upper(),
        billing_period=BillingPeriod(data.get("billing_period", "month")),
        commission_rate=_optional_decimal(data.get("commission_rate")),
        max_active_proposals=data.get("max_active_proposals"),
        description=data.get("description", ""),
        features=tuple(data.get("features", ())),
    )


def parse_marketplace_config(data: dict[str, Any]) -> MarketplaceConfig:
    """Build a MarketplaceConfig from parsed YAML; absent keys keep defaults."""
    section = data.get("marketplace", {}) or {}
    kwargs: dict[str, Any] = {}

    for key in ("default_commission_rate", "payment_processing_fee"):
        if key in section:
            kwargs[key] = to_decimal(section[key])
    for key in ("invoice_due_days", "payout_delay_days", "subscription_term_days"):
        if key in section:
            kwargs[key] = int(section[key])
    if "default_currency" in section:
        kwargs["default_currency"] = str(section["default_currency"]).upper()
    if "payout_schedule" in section:
        kwargs["payout_schedule"] = str(section["payout_schedule"])

    plans = tuple(parse_pricing_plan(p) for p in data.get("pricing_plans", ()) or ())

    return MarketplaceConfig(
        pricing_plans=plans,
        checksum=compute_checksum(data),
        **kwargs,
    )


def load_marketplace_config(path: Path) -> MarketplaceConfig:
    return parse_marketplace_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization; deterministic."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
