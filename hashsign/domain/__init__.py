"""Domain layer for HashSign: documents, signatures and their lifecycle rules."""
