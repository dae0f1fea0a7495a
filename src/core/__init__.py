"""
Core domain models, fixed-point math, contracts, and errors.

This module contains the foundational building blocks of the ledger that are
independent of access control and storage.
"""
