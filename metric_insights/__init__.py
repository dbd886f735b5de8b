"""
Metric Insights Package.

FastAPI service that explains week-over-week changes of dashboard KPI metrics
(active users, events, new users, time to lead submission) by attributing them
to traffic channels, devices, regions and landing pages.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and database pool
    - models: Pydantic schemas and enums
    - services: Analysis services
    - sql: Parameterized SQL queries
"""

__version__ = "1.0.0"
