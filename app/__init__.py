"""Capstone lifecycle service: semester-scoped RBAC and cascading soft-delete."""
