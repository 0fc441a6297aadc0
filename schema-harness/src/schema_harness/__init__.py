"""schema-harness.

Drives schema validators through declarative test suites (schema + data +
expected outcome) registered with a host test framework:

- suite discovery from inline lists or glob patterns
- skip/only selection at every registration level
- synchronous, asynchronous and exception validation protocols
- per-result hooks for downstream reporting
"""

__all__ = [
    "cli",
    "integration",
    "runner",
    "suite",
    "validators",
]
