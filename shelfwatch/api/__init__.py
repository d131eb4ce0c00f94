"""
==============================================================================
API Package
==============================================================================

Routers:
--------
- health: Liveness message and health checks
- products: Product CRUD under /users

==============================================================================
"""
