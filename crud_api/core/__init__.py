"""
Core utilities shared across the sweets API: settings and logging setup.
"""
