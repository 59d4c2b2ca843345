"""
Shared fixtures for generation gateway unit tests.
"""

from functools import partial
from typing import Dict, Optional

import pytest

from generation_gateway.core.catalog import PROVIDER_DESCRIPTORS
from generation_gateway.core.config import GatewaySettings
from generation_gateway.core.factory import ProviderFactory

from fakes import FakeProvider, credentials_for


@pytest.fixture
def make_settings():
    """Build settings with credentials for the named backends."""

    def _make(*configured: str, **overrides) -> GatewaySettings:
        overrides.setdefault("stream_delay", 0)
        return GatewaySettings(api_keys=credentials_for(*configured), **overrides)

    return _make


@pytest.fixture
def make_fake_factory():
    """Build a ProviderFactory whose adapters are FakeProviders."""

    def _make(settings: GatewaySettings, availability: Optional[Dict[str, bool]] = None, reply: str = "hello world"):
        fake = partial(FakeProvider, availability=availability or {}, reply=reply)
        classes = {key: fake for key in PROVIDER_DESCRIPTORS if key != "grok"}
        return ProviderFactory(settings, adapter_classes=classes)

    return _make
