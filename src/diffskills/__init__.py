"""diffskills — declarative review rules over unified diffs."""

__version__ = "0.1.0"
