"""
Kochbuch - recipe import for a German home-cooking recipe collection.

Turns recipe pages from arbitrary cooking websites into one structured
recipe shape: parsed ingredients, grouped steps, metadata, keywords.
"""

__version__ = "1.0.0"
