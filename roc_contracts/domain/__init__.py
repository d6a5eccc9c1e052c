"""Contract lifecycle rules and derived figures.

This package contains logic that defines *what* the business rules are,
independent from *where* they are applied (services, UI callers, etc.).
Nothing here performs I/O; the current time is always passed in.
"""
