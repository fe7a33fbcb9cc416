"""KEGG REST API tool bridge.

Validated operations and resource URIs over the KEGG flat-text REST API,
with parsers for KEGG entries and tab-delimited listings.
"""

__version__ = "1.0.0"
__author__ = "Austin P. Morrissey"
