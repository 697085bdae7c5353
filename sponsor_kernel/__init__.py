"""
Sponsor Kernel - deal lifecycle and billing core

An in-memory engine for sponsorship deals with:
- Decimal-exact commission splits
- Append-only proposal history
- Idempotent invoice payment
- Typed, machine-readable errors
"""

__version__ = "0.1.0"
