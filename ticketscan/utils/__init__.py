"""
Shared helpers: pricing, time normalization, airports, retries, logging.
"""
