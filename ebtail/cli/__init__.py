"""
Command-line interface for ebtail.
"""
