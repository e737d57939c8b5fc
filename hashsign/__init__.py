"""
HashSign - multi-party document signing

A creator registers a document by its content fingerprint together with a
fixed list of required signers. Each signer attaches exactly one approval
and the document completes once every required signer has approved.

The authoritative record lives on a ledger; the signed content lives in a
content-addressed blob store. This package holds the lifecycle rules and
the workflow that keeps the two in step.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
