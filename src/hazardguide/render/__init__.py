"""Step diagram rendering."""

from hazardguide.render.diagram import build_step_svg, render, to_svg_data_url

__all__ = ["build_step_svg", "render", "to_svg_data_url"]
