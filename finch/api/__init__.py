"""
HTTP collaborators for Finch.

Provides the reverse image search (Google Cloud Vision web detection) and
plain image downloads over one shared requests session.
"""

from .vision import VisionClient, create_client, create_session

__all__ = ['VisionClient', 'create_client', 'create_session']
