"""
Read-only vehicle catalog (year/make/model/trim reference data).

The table is filled offline by the `ingestion` package.
"""
