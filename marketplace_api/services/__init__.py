"""
Services layer for the Marketplace API.

This module contains domain-focused service classes that encapsulate
business logic, separating it from HTTP handling in routers.
"""
