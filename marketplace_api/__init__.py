"""
Service Marketplace API
"""
