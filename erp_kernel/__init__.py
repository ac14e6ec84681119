"""
ERP Finance Kernel

Shared foundation for the financial aggregation and reconciliation engine:
- Immutable, Decimal-only domain records
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging with request-scoped context
- Read-only SQLAlchemy selectors for the reference persistence adapter
"""

__version__ = "0.1.0"
