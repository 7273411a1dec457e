"""
BBox Buddy - A minimalist desktop tool for bounding box annotation.

Built with PyQt6 for drawing, editing and exporting rectangular
annotations on images as corner-format JSON.
"""

__version__ = "1.0.0"
__author__ = "BBox Buddy Team"
