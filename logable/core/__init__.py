"""
Core configuration, context, error and database utilities.
"""
