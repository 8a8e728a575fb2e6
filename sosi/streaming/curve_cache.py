"""
Curve cache for ring reference resolution.

Polygons (``.FLATE``) describe their boundaries as signed references to curves
declared earlier in the same file. Curves are cached by local id as they are
read so that a polygon can be assembled in the same forward pass.

Memory: O(curves in file); coordinate sequences are stored once as tuples.
"""

from typing import Dict, List, Optional, Tuple

from ..core.types import Coordinate

CurveCoordinates = Tuple[Coordinate, ...]


class CurveCache:
    """
    Stream-scoped local id → curve coordinate mapping.

    One cache belongs to one open reader; caches are never shared between
    readers.
    """

    def __init__(self):
        self.index: Dict[int, CurveCoordinates] = {}

    def put(self, local_id: int, coordinates: List[Coordinate]) -> None:
        """
        Store the decoded coordinates of a curve.

        Args:
            local_id: Curve serial number (must be positive)
            coordinates: Decoded vertices in declaration order
        """
        self.index[abs(local_id)] = tuple(coordinates)

    def resolve(self, reference: int) -> Optional[CurveCoordinates]:
        """
        Resolve a signed reference.

        Args:
            reference: Curve id; a negative value requests reversed vertex order

        Returns:
            Vertices in traversal order, or None if the curve is unknown

        Example:
            >>> cache = CurveCache()
            >>> cache.put(45, [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
            >>> cache.resolve(-45)
            ((1.0, 1.0), (1.0, 0.0), (0.0, 0.0))
        """
        coordinates = self.index.get(abs(reference))
        if coordinates is None:
            return None
        return coordinates[::-1] if reference < 0 else coordinates

    def __contains__(self, local_id: int) -> bool:
        return abs(local_id) in self.index

    def __len__(self) -> int:
        return len(self.index)

    def clear(self):
        """Clear cache to release memory."""
        self.index.clear()
