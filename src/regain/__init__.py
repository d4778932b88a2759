"""regain: progressive-overload session planning and adherence tracking."""

__version__ = "0.1.0"
