"""qualitygate — heuristic pre-commit quality gate for markup, stylesheets and scripts."""

__version__ = "1.0.0"
