"""
Jobster API
Job-application tracking backend.

Architecture:
- FastAPI: HTTP routing, validation, bearer auth dependencies
- MongoDB: users and jobs collections (pymongo)
- Aggregation pipelines: dashboard stats computed on every request
"""

__version__ = "1.0.0"
