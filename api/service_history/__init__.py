"""
Service history: maintenance events recorded against a vehicle.
"""
