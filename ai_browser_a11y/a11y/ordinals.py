"""Per-page frame ordinal registry and encoded id helpers."""

from typing import Dict, Optional, Tuple

from ..core.errors import FrameOrdinalLimitError

# Ordinals 0..99; the main frame always holds 0
MAX_FRAME_ORDINALS = 100


def encode_id(ordinal: int, backend_node_id: int) -> str:
    """Build an encoded id such as ``"3-117"``."""
    return f"{ordinal}-{backend_node_id}"


def decode_id(encoded_id: str) -> Tuple[int, int]:
    """
    Split an encoded id into its frame ordinal and backend node id.

    Raises:
        ValueError: If the value is not of the form ``<int>-<int>``
    """
    ordinal, sep, backend_id = encoded_id.partition("-")
    if not sep:
        raise ValueError(f"not an encoded id: {encoded_id!r}")
    return int(ordinal), int(backend_id)


class FrameOrdinalRegistry:
    """
    Assigns small stable integers to protocol frame ids.

    The main frame is keyed by ``None`` and pre-registered as ordinal 0.
    Ordinals are never reused for the lifetime of the registry.
    """

    def __init__(self, limit: int = MAX_FRAME_ORDINALS):
        self.limit = limit
        self._ordinals: Dict[Optional[str], int] = {None: 0}
        self._frame_ids: Dict[int, Optional[str]] = {0: None}

    def ordinal_for(self, frame_id: Optional[str]) -> int:
        """
        Return the ordinal of a frame id, assigning the next one if unseen.

        Raises:
            FrameOrdinalLimitError: If the page already holds ``limit`` frames
        """
        ordinal = self._ordinals.get(frame_id)
        if ordinal is not None:
            return ordinal

        ordinal = len(self._ordinals)
        if ordinal >= self.limit:
            raise FrameOrdinalLimitError(self.limit)

        self._ordinals[frame_id] = ordinal
        self._frame_ids[ordinal] = frame_id
        return ordinal

    def frame_id_for(self, ordinal: int) -> Optional[str]:
        """Reverse lookup; ``KeyError`` for unassigned ordinals."""
        return self._frame_ids[ordinal]

    def encode(self, frame_id: Optional[str], backend_node_id: int) -> str:
        return encode_id(self.ordinal_for(frame_id), backend_node_id)

    def reset(self) -> None:
        """Forget every frame except the main frame."""
        self._ordinals = {None: 0}
        self._frame_ids = {0: None}

    def __len__(self) -> int:
        return len(self._ordinals)

    def __contains__(self, frame_id: object) -> bool:
        return frame_id in self._ordinals
