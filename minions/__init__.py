"""Minions - hierarchical task management with versioned dependencies."""

__version__ = "0.1.0"
