"""
Error classification rules for the reading assessment pipeline.

This package contains modules for deriving reading errors from an alignment:
- flagging.py: Skipped, misread, hesitation, repetition and skipped-line scans
"""
