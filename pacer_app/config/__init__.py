"""
Configuration module.

Default parameters, YAML-based overrides and validation for the clock,
scheduler, ingestion, storage and delivery components.
"""
