"""
multisession - Per-request session registry for FastAPI

Tracks named sessions for the lifetime of one request and saves the
mutated ones when the request completes.

Architecture:
- Each module is self-contained with clear interfaces
- Stores are completely replaceable
- All communication through defined interfaces

Modules:
- errors: Error types and multi-error aggregation
- session: Session values, flashes and dirty tracking
- registry: Per-request session cache and save protocol
- storage: Store protocol and in-memory/Redis backends
- cookies: Session cookie rendering
- middleware: Request-lifecycle glue for FastAPI
"""

__version__ = "1.0.0"
