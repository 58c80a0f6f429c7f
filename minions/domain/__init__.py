"""Domain layer for Minions.

Pure models and algorithms: no I/O, no side effects. The store,
services and interfaces build on top of this package.
"""
