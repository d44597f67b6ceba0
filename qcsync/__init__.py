"""
QC Sheet Sync - copy Shopify order metafields into a Google Sheet.
"""

__version__ = "1.0.0"
