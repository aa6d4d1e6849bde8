# data/__init__.py
"""
Data layer for MongoDB operations.
One repository module per collection, see `relaychat.data.repositories`.
"""
