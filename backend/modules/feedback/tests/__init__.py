# backend/modules/feedback/tests/__init__.py

"""
Tests for the reviews and feedback module: review lifecycle, business
rating aggregation, feedback handling, owner notifications and the HTTP API.
"""
