"""Shared ledger values for tests."""

SCENARIO_TIMESTAMP = 1715136000
