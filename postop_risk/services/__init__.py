"""
Clients for external collaborators.
"""
from .vision import VisionServiceClient

__all__ = ["VisionServiceClient"]
