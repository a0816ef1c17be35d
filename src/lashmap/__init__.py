"""
Lash Mapper - A desktop editor for eyelash extension placement maps.

Built with PyQt6. Strokes, stroke templates and length labels are sketched
on a pair of stylized eye outlines and saved as JSON snapshots.
"""

__version__ = "1.0.0"
__author__ = "Lash Mapper Team"
