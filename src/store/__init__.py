"""Coordination store layer.

This module defines the store contract and its ZooKeeper implementation.
It also translates snapshot ACLs into the client's ACL types.
"""
