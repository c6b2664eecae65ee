# deep_redact/engine/__init__.py

"""Engine package: cycle normalization, path matching, transformers and traversal.

This package contains the components that walk a value graph and decide,
node by node, what is kept, replaced or removed.
"""
