"""
Floor plan recognition - raster/PDF floor plans to metric walls and rooms
"""
__version__ = "0.1.0"
