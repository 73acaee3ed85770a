"""Core business logic layer.

Subpackages:
- identifiers: sequential display id allocation (DES1, TAX2, ...)
- listing: comparator registry and the filter/sort/paginate pipeline
- resources: CRUD facade per resource type
"""
__all__ = ["identifiers", "listing", "resources"]
