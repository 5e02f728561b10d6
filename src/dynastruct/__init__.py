"""
dynastruct: push-based reactive properties for record types.

Dependencies between fields are declared up front and resolved at generation
time into plain method calls, so changing a field recomputes everything that
depends on it without any runtime subscription bookkeeping.
"""

__version__ = "0.2.0"
