"""
Rauth Modules - Black Box Architecture

Each module is a self-contained black box with:
- Clear interface (public API)
- Hidden implementation details
- Single responsibility

The session engine talks to stores and the remote API only through the
protocols in session.interfaces and remote.interfaces.
"""
