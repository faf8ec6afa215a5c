"""
Command line interface for the Portal bridge SDK.
"""
