"""
psmqc - PSM summarization and quality statistics for proteomics search results
"""

from importlib import metadata

try:
    __version__ = metadata.version("psmqc")
except metadata.PackageNotFoundError:
    __version__ = "unknown"
