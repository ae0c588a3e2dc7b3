"""
Terrain Weathering - Utilities
"""
