"""Aggregation helpers.

This package folds parsed records into per-employee aggregates, merges them
across files, and derives the small chart-ready tables and summary figures
the dashboard and CLI display. The derived tables are cheap and are rebuilt
on every read from the cached folder aggregate.
"""
