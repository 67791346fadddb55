"""
es-keystore manages an Elasticsearch secure settings keystore.

A declared keystore (should it exist, which settings it holds, whether
undeclared settings are purged) is reconciled against the keystore on disk by
running the `elasticsearch-keystore` tool.
"""

__all__ = [
    "config",
    "keystore",
    "manifest",
    "reconciler",
    "provider",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
