"""Shared test fixtures"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from content_valuator.registry.rate_tables import RateTables
from content_valuator.registry.signature_registry import SignatureRegistry
from content_valuator.pricing.pricing_policy import PricingPolicy
from content_valuator.utils.config_manager import ConfigManager


# fixed reference time for deterministic age calculations
REFERENCE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def reference_time() -> datetime:
    """Fixed reference time."""
    return REFERENCE_TIME


@pytest.fixture
def config_dir() -> str:
    """Bundled config directory."""
    return str(Path(__file__).parent.parent / "config")


@pytest.fixture
def config_manager(config_dir: str) -> ConfigManager:
    """ConfigManager over the bundled config files."""
    return ConfigManager(config_dir=config_dir)


@pytest.fixture
def signature_registry(config_manager: ConfigManager) -> SignatureRegistry:
    return SignatureRegistry.from_config(config_manager)


@pytest.fixture
def rate_tables(config_manager: ConfigManager) -> RateTables:
    return RateTables.from_config(config_manager)


@pytest.fixture
def pricing_policy(config_manager: ConfigManager) -> PricingPolicy:
    return PricingPolicy.from_config(config_manager)


@pytest.fixture
def tmp_config_dir():
    """Temporary config directory (unit tests)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_data = {
            "valuation": {
                "min_value": 1.0,
                "max_value": 300.0,
                "default_confidence": 50,
            },
            "portfolio": {
                "high_value_threshold": 50.0,
                "top_k": 2,
                "annual_revenue_rate": 0.10,
            },
        }
        config_path = os.path.join(tmpdir, "config.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_data, f, allow_unicode=True)

        signatures = {
            "signatures": [
                {"name": "TestActor", "patterns": ["TestBot"], "risk_level": "medium", "is_commercial": True},
                {"name": "", "patterns": ["Nameless"]},
                {"name": "NoPatterns", "patterns": []},
                {"name": "TestActor", "patterns": ["Duplicate"]},
            ],
        }
        with open(os.path.join(tmpdir, "signatures.yaml"), "w", encoding="utf-8") as f:
            yaml.dump(signatures, f, allow_unicode=True)

        yield tmpdir
