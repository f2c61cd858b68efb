"""
Format operations: an append-only log of formatting actions applied to a snippet.

Rows are never updated. The settings and result are stored as supplied.
"""
