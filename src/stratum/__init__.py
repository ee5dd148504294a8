"""Stratum: layered configuration for editor sessions.

Resolves the effective settings for a buffer from embedded defaults,
per-syntax defaults, user TOML files, and per-session overrides, and
reloads user files as they change on disk.
"""
