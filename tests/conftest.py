"""Shared pytest fixtures for qualinject tests."""

pytest_plugins = ["qualinject.integrations.pytest_plugin"]
