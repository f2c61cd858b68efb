"""
JSON snippets: stored JSON text samples with validity metadata.

The text is opaque here; callers decide whether it parses and record the
outcome in is_valid / validation_error.
"""
