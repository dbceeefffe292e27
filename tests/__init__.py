"""
schemastore test suite.

This package contains:
- unit/: Unit tests for each module
- integration/: Schema-file-to-diff flows across whole stores
"""
