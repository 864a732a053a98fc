"""
Correspondence pre-processing
"""
from .clean_points import clean_points, remove_duplicates

__all__ = [
    "clean_points", "remove_duplicates",
]
