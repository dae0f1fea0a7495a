"""
Test suite for the MIP65 ledger

Contains:
- tests/unit/          : Unit tests for individual modules
"""
