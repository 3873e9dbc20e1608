"""
Global constants for corner-point grid processing.

Array layouts follow the Eclipse conventions: cells are ordered with
i fastest, then j, then k, and ZCORN is a (2*nz, 2*ny, 2*nx) array
flattened with x fastest.
"""

# Values per pillar in COORD: (x1, y1, z1, x2, y2, z2)
VALUES_PER_PILLAR = 6

# Corner elevations per cell in ZCORN
CORNERS_PER_CELL = 8

# MAPAXES: (X1, Y1) point on y-axis, (X2, Y2) origin, (X3, Y3) point on x-axis
MAPAXES_SIZE = 6

# Number of integers read from DIMENS / SPECGRID
DIMS_SIZE = 3

# Local cell corner numbering is di + 2*dj + 4*dk.
# Faces are listed in the order I-, I+, J-, J+, K-, K+.
HEX_FACES = (
    (0, 2, 6, 4),
    (1, 3, 7, 5),
    (0, 1, 5, 4),
    (2, 3, 7, 6),
    (0, 1, 3, 2),
    (4, 5, 7, 6),
)

# 2D cells: corner numbering di + 2*dj, faces I-, I+, J-, J+
QUAD_FACES = (
    (0, 2),
    (1, 3),
    (0, 1),
    (2, 3),
)

# Length of one deck length unit in metres
LENGTH_UNITS = {
    "METRIC": 1.0,
    "FIELD": 0.3048,
    "LAB": 0.01,
}

# Default PINCH threshold thickness [m]
DEFAULT_PINCH_THICKNESS = 0.001
