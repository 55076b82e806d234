"""
Routers for WardShift API.
"""
