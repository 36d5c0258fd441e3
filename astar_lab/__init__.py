"""Step-by-step A* on an editable occupancy grid."""

__version__ = "0.1.0"
