"""
cpgrid: corner-point grid processing.

Builds unstructured simulation grids from corner-point geology
(COORD/ZCORN/ACTNUM/MAPAXES), with minimum pore volume filtering
and pinch handling, and owns the resulting grid handle.
"""

__version__ = "0.1.0"
