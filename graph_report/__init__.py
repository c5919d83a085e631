"""graph-report: dependency tree and JSON reports for resolved module graphs."""

__version__ = "0.1.0"
