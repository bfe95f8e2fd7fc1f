"""Thin wrappers around the S3 API, one module per CRUD verb."""
