"""
Vehicles owned by the user: create, list, mileage updates, deletes.
"""
