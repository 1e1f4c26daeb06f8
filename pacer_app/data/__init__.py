"""
Plan ingestion and normalization module.

Handles detection of the two supported plan JSON schemas, normalization into
the canonical plan model, and plan invariant validation.
"""
