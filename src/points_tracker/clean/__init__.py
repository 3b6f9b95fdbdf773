"""Cleaning utilities for the pipeline.

Turns loosely-structured spreadsheet rows into validated `PointRecord`
objects: tolerant column lookup, date and number parsing, and billing-cycle
classification.
"""
