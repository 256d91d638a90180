"""EZID service integrations."""
