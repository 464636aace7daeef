"""Core configuration loading primitives.

Modules in this package resolve, execute and validate the operator's
configuration script. They are framework-agnostic; the HTTP layer only
consumes the `Config` record they produce.
"""
