"""
Command line interface helpers
"""
