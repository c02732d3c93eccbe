"""
Data - CSV normalization, content identifiers and content-addressed uploads.
"""
