"""points_tracker package.

Contains modules for reading employee point spreadsheets organized by
month-folder, classifying each record into the company's 26→25 billing cycle,
merging per-employee aggregates, and serving cached, chart-ready series to the
CLI and the Streamlit dashboard.

Architecture:
- Ingest → Clean → Aggregate, all in memory
- pandas decodes the spreadsheets
- Pydantic models validate records and aggregates
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
