"""
Offline catalog ingestion.

Nothing here runs on the request path. The `vehicle-catalog` command
(`ingestion.cli`) drives CSV-to-SQL conversion, NHTSA vPIC harvesting and
bulk loads into `vehicle_catalog`.
"""
