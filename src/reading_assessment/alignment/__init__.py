"""
Reference preparation and word alignment for the reading assessment pipeline.

This package contains modules for aligning a reading against its reference text:
- word_alignment.py: Currency expansion and word-level alignment into AlignedItems
"""
