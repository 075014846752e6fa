from sankey_layout.renderers.base import Renderer
from sankey_layout.renderers.svg import InteractionHooks, SvgRenderer

__all__ = ["InteractionHooks", "Renderer", "SvgRenderer"]
