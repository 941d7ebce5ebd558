"""Build Kusto function declarations into control-command scripts."""

__version__ = "0.1.0"
