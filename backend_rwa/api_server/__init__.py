"""
API server package: HTTP interface for validation records and reviewer actions.

Delegates to the analytics layer for checks and to the database layer for
records; maps application errors to HTTP status codes.
"""
