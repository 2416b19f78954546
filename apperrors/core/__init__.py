"""
Core package.

Holds library-wide configuration.
"""
