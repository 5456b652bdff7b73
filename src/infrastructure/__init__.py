"""Infrastructure layer for loading API descriptions.

- **repository**: File-backed, optionally caching description repository

The request pipeline depends only on the repository's ``get`` method, so
other storage (a remote registry, a database) can be swapped in without
touching it.
"""
