"""
Service types: the named maintenance operations service records point at.
"""
