"""
Infrastructure layer package.

Adapters that store errors in external systems (SQL databases).
"""
