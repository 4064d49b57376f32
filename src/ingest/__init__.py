"""Snapshot ingestion.

This module opens snapshot inputs and decodes them into node records.
It never materializes the whole snapshot in memory.
"""
