"""
Larder - Recipe import and ingredient normalization.

Packages:
- recipe_import: Fetch recipe pages and extract structured fields
- ingredients: Parse, convert, scale and canonicalize ingredient lines
"""

__version__ = "0.3.0"
