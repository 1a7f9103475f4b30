"""Storage collaborators: the repository interface and the in-memory store.

Import from the submodules directly; ``memory`` depends on the admission
package, which in turn depends on ``repository``.
"""
