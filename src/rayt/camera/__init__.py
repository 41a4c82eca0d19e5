"""Camera module for primary ray generation.

Components:
    pinhole: Look-at pinhole camera with Python-side construction and a
        Taichi-side get_ray()

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across the image
    t in [0, 1]: bottom to top across the image
"""

from .pinhole import Camera, get_active_camera, get_camera_info, get_ray, setup_camera

__all__ = [
    "Camera",
    "setup_camera",
    "get_active_camera",
    "get_ray",
    "get_camera_info",
]
