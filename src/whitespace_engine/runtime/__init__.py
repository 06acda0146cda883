"""Telemetry and event plumbing shared across the package."""
