"""
Utility functions module.

Common helpers for timestamp handling and duration formatting shared by the
plan model, storage and event sinks.

Time Semantics:
- Session elapsed time comes from a monotonic source owned by the clock
- Wall-clock UTC time is only used for plan creation stamps and event logs
"""
