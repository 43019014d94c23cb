"""
Workspace role and permission feature module.

Roles are a fixed enumeration, each bound to a constant permission set.
The Role table mirrors the registry as seed data so members can reference it.
"""
