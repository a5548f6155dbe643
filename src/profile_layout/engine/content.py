"""
Module: engine.content

Purpose:
    Default content payloads for freshly inserted modules.
    The layout engine never reads these blobs; they only seed
    the editor forms.

Key Functions:
    - default_content(): Fresh content dict for a module type
"""

from __future__ import annotations

import copy
from typing import Any, Dict


_DEFAULT_CONTENT: Dict[str, Dict[str, Any]] = {
    "hero": {
        "title": "Provider Name",
        "subtitle": "Trade / Speciality",
        "description": "A short introduction and value proposition.",
        "profile_image": None,
    },
    "text": {
        "title": "About me",
        "text": "Introduce yourself in more detail: your experience, methods and why clients choose you.",
    },
    "price_list": {
        "title": "My services",
        "items": [
            {"service": "Basic service", "price": "15000", "unit": "HUF"},
            {"service": "Premium package", "price": "25000", "unit": "HUF"},
        ],
    },
    "contact": {
        "title": "Contact",
        "phone": "+36 30 123 4567",
        "email": "email@example.com",
        "website": "https://example.com",
        "address": "Budapest",
    },
    "stats": {
        "stats": [
            {"label": "Happy clients", "value": "150+"},
            {"label": "Finished projects", "value": "200+"},
            {"label": "Years of experience", "value": "5+"},
            {"label": "Average rating", "value": "4.9"},
        ],
    },
    "reviews": {
        "title": "What clients say",
        "average_rating": 4.8,
        "total_reviews": 0,
        "reviews": [],
    },
    "gallery": {"title": "Gallery", "images": []},
    "video": {"title": "Video", "url": ""},
    "certificates": {"title": "Certificates", "certificates": []},
}


def default_content(module_type: str) -> Dict[str, Any]:
    """
    Content for a new module of the given type.

    Returns a deep copy so callers may mutate it freely.
    Unknown types get an empty dict.
    """
    return copy.deepcopy(_DEFAULT_CONTENT.get(module_type, {}))
