"""
Caller identity handed to the catalog by the identity collaborator.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Caller:
    """Authenticated caller issuing a catalog request.

    Only the identifier is needed here; token handling lives elsewhere.
    """

    id: int
