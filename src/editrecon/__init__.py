"""editrecon — run code actions over a project snapshot and reconcile the file changes."""

__version__ = "0.1.0"
