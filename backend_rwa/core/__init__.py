"""
Core utilities shared by the analytics engine, database layer, and API server.
"""
