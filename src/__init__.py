"""Rule notation and neighborhood caching for Life-like cellular automata."""

__version__ = "0.1.0"
