"""Application layer for HashSign: ports and workflow services."""
