"""Permission matrix model and loader.

The matrix is the static catalogue of permissions and memberships the
registry is built from.

Example
-------
::

    from gigvora_access.matrix import MatrixLoader

    matrix = MatrixLoader().load("permission_matrix.json")
    print(len(matrix.permissions))
"""
from __future__ import annotations

from gigvora_access.matrix.loader import MatrixConfigError, MatrixLoader
from gigvora_access.matrix.schema import (
    MembershipDefinition,
    PermissionDefinition,
    PermissionMatrix,
    normalise_key,
)

__all__ = [
    "MatrixConfigError",
    "MatrixLoader",
    "MembershipDefinition",
    "PermissionDefinition",
    "PermissionMatrix",
    "normalise_key",
]
