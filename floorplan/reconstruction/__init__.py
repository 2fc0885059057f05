# Reconstruction module
# Translates recognized walls into the input of a 3D scene builder:
# - Shared vertices and index-pair edges
# - Per-edge heights and thicknesses
# - Door/window openings

from .builder import SceneBuilder, SceneOpening, ScenePlan, ScenePlanBuilder

__all__ = ["SceneBuilder", "SceneOpening", "ScenePlan", "ScenePlanBuilder"]
