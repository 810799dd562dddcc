"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the treasury ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. atomicity.py - Transfers apply completely or not at all
2. conservation.py - Balance movements match amount and rate exactly
3. determinism.py - Read paths and analytics are pure and reproducible
4. rates.py - Directed rates are not made reciprocal
5. temporal.py - Scheduling and log ordering

These tests use hypothesis for property-based testing.
"""
