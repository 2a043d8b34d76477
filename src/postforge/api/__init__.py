"""API module for postforge.

- Validates inputs, reads/writes DB through the repository
- Returns payloads for UI
- Forbidden: generation logic, metric aggregation math
"""
