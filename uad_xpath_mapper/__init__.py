"""
UAD XPath Mapper
Flattens appraisal XML feeds into `text : xpath` lines
"""

__version__ = "1.0.0"
