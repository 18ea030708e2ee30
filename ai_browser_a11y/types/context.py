"""Accessibility snapshot types shared across the a11y pipeline."""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field


# "<frameOrdinal>-<backendNodeId>", e.g. "0-42"
EncodedId = Annotated[str, Field(description="Encoded element ID in format: frameOrdinal-backendNodeId")]


class AccessibilityNode(BaseModel):
    """
    A node of the accessibility tree.

    Flat nodes (as decorated from the protocol) carry parent/child ids;
    hierarchical nodes carry resolved ``children``.
    """
    role: str = ""
    name: Optional[str] = None
    description: Optional[str] = None
    value: Optional[str] = None
    node_id: str = ""
    backend_dom_node_id: Optional[int] = None
    parent_id: Optional[str] = None
    child_ids: List[str] = Field(default_factory=list)
    properties: List[Dict[str, Any]] = Field(default_factory=list)
    children: List["AccessibilityNode"] = Field(default_factory=list)
    encoded_id: Optional[EncodedId] = None


class BackendIdMaps(BaseModel):
    """Encoded id lookups produced by one DOM walk."""
    tag_name_map: Dict[EncodedId, str] = Field(default_factory=dict)
    xpath_map: Dict[EncodedId, str] = Field(default_factory=dict)


class TreeResult(BaseModel):
    """Accessibility snapshot of a single frame."""
    tree: List[AccessibilityNode] = Field(default_factory=list)
    simplified: str = ""
    iframes: List[AccessibilityNode] = Field(default_factory=list)
    id_to_url: Dict[EncodedId, str] = Field(default_factory=dict)
    xpath_map: Dict[EncodedId, str] = Field(default_factory=dict)


class FrameSnapshot(BaseModel):
    """Per-frame extraction result awaiting stitching."""
    tree: str
    xpath_map: Dict[EncodedId, str] = Field(default_factory=dict)
    url_map: Dict[EncodedId, str] = Field(default_factory=dict)
    # Absolute XPath of the hosting iframe element, "/" for the main frame
    frame_xpath: str
    backend_node_id: Optional[int] = None
    # Encoded id of the hosting iframe in its parent frame
    host_encoded_id: Optional[EncodedId] = None
    frame_id: Optional[str] = None
    frame_ordinal: int = 0


class CombinedA11yResult(BaseModel):
    """Stitched snapshot of a page and all of its descendant frames."""
    combined_tree: str
    combined_xpath_map: Dict[EncodedId, str] = Field(default_factory=dict)
    combined_url_map: Dict[EncodedId, str] = Field(default_factory=dict)


AccessibilityNode.model_rebuild()
