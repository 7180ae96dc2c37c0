"""Application package for the campus administration backend.

This package exposes the routers, services, repositories and models
used by the FastAPI application. Individual modules contain the
concrete implementations and documentation.
"""
