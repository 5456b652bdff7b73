"""API utilities.

- **responses**: orjson-backed JSON response class
"""
