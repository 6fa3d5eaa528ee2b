"""Shared pytest configuration for gritty tests."""

pytest_plugins = ["gritty.testing.conftest"]
