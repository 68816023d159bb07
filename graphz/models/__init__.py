"""
Pydantic models for GRAPHZ.

Form and profile shapes. No imports from the controller or store.
"""

from graphz.models.graph import GraphForm, UserProfile

__all__ = [
    "GraphForm",
    "UserProfile",
]
