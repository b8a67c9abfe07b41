"""Integration test configuration — auto-skip when live Cloudflare credentials are unavailable."""

import os

import pytest


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: marks tests requiring live Cloudflare KV and Workers AI"
        " (deselect with '-m \"not integration\"')",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless FEEDBACK_LENS_INTEGRATION=1."""
    if os.environ.get("FEEDBACK_LENS_INTEGRATION") == "1":
        return
    skip_integration = pytest.mark.skip(
        reason="Set FEEDBACK_LENS_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
