"""Core library: configuration, repository storage, trees, and providers.

Primary namespaces:
- ``repo_harbor.lib.repo`` for the on-disk repository store.
- ``repo_harbor.lib.tree`` for working-copy tree materialization.
- ``repo_harbor.lib.providers`` for source-control, build, and launch wrappers.
"""
