"""dirtally - per-subdirectory size, file and subfolder tallies."""

__version__ = "0.1.0"
