"""Application package for the developer/project tracker backend.

This package exposes the model, validator, query, repository and
service modules used by the FastAPI application in `main`. Individual
modules contain the concrete implementations and documentation.
"""
