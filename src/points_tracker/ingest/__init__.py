"""Ingestion helpers: the source catalog, file retrieval and sheet decoding.

Each catalog file belongs to one employee; ingesting it yields a file-level
`EntityAggregate` that the merger folds into the folder result.
"""
