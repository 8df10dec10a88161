"""
Service layer: permission strategies and domain services.
"""
