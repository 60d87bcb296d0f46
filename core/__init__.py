"""
Core package - Cross-cutting utilities shared by services and routes.
"""
