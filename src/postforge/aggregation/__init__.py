"""Aggregation module for performance summaries.

- Reads published-session performance notes and produces aggregate stats
  (totals, averages, best performer per metric)
- Forbidden: writes of any kind, generation provider calls
"""
