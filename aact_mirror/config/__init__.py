"""
Configuration loading and validation for catalog access and local paths.

Provides strongly typed settings objects for the catalog endpoint, HTTP
timeouts, and output directories with upfront validation.
"""
