"""Upstream image source adapters.

Example:
    >>> from pawfeed.adapter import DogCeoAdapter, TheCatApiAdapter
    >>> DogCeoAdapter().name, TheCatApiAdapter().name
    ('dog.ceo', 'thecatapi')
"""

from pawfeed.adapter.base import BaseImageAdapter, ImageSource
from pawfeed.adapter.cat import TheCatApiAdapter
from pawfeed.adapter.dog import DogCeoAdapter

__all__ = [
    "ImageSource",
    "BaseImageAdapter",
    "DogCeoAdapter",
    "TheCatApiAdapter",
]
