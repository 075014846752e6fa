"""Layout parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NODE_WIDTH: float = 20
DEFAULT_NODE_PADDING: float = 10
DEFAULT_CURVATURE: float = 0.5


class LayoutConfig(BaseModel):
    """Drawing size and spacing for one layout run.

    Accepts both snake_case names and the camelCase keys used in Sankey
    documents (``nodeWidth``, ``nodePadding``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    node_width: float = Field(default=DEFAULT_NODE_WIDTH, gt=0, alias="nodeWidth")
    node_padding: float = Field(default=DEFAULT_NODE_PADDING, ge=0, alias="nodePadding")
    curvature: float = Field(default=DEFAULT_CURVATURE, ge=0, le=1)
