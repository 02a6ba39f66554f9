"""Eco Admin - administrative dashboard for geotagged trash reports"""
__version__ = "1.0.0"
