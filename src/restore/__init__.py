"""Restore engine.

This package rebuilds a ZooKeeper tree from decoded snapshot records.
It tracks ancestry, materializes missing parents, and applies nodes.
"""
