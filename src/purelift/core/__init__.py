"""
Pure training rules for purelift.

Session building, in-session edits, progressive-overload resolution and
weekly volume aggregation.  Nothing in this package performs I/O except
the YAML loaders in engine/ and seed.py.
"""
