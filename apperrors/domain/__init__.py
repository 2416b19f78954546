"""
Domain layer package.

Contains the error value, its codes, stack capture and chain queries.
No framework imports and no IO. Serialization goes through the wire schemas
of the interfaces layer.
"""
