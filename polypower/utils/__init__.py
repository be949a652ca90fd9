"""
Shared data types, statistics and seeding helpers
"""
