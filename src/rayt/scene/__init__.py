"""Scene module for shape descriptions, scene upload and built-in scenes.

Components:
    shapes: Sphere, Rect, Box, FlipFace and ShapeList descriptions
    intersection: Device primitive tables and the nearest-hit search
    scene: Scene container, activation and Python-side hit queries
    builtin: Cornell box and two-spheres scenes with their cameras
    serialization: Scene descriptions as JSON-compatible dicts

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for spheres and rectangles
    - A primitive table in scan order with flip flags and material indices
    - One material table shared by all primitives
"""

from .builtin import SCENE_NAMES, build_camera, build_cornell_box, build_scene, build_two_spheres
from .intersection import (
    MAX_PRIMITIVES,
    MAX_RECTS,
    MAX_SPHERES,
    clear_scene,
    get_primitive_count,
    intersect_scene,
)
from .scene import HitResult, Scene, get_active_scene, reset_active_scene
from .serialization import scene_from_dict, scene_to_dict
from .shapes import Box, FlipFace, Rect, ShapeList, Sphere

__all__ = [
    "Sphere",
    "Rect",
    "Box",
    "FlipFace",
    "ShapeList",
    "Scene",
    "HitResult",
    "get_active_scene",
    "reset_active_scene",
    "clear_scene",
    "get_primitive_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_RECTS",
    "MAX_PRIMITIVES",
    "build_scene",
    "build_camera",
    "build_cornell_box",
    "build_two_spheres",
    "SCENE_NAMES",
    "scene_to_dict",
    "scene_from_dict",
]
