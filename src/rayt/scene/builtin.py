"""Built-in scenes and their cameras.

Two scenes are provided:

- ``cornell``: the classic Cornell box, a 555-unit enclosure with a red left
  wall, a green right wall, white floor/ceiling/back, a ceiling area light and
  two white boxes. All walls face inward. Black background.
- ``two_spheres``: a small sphere resting on a huge ground sphere, both grey
  diffuse, under a white sky.

Example:
    >>> from rayt.scene.builtin import build_camera, build_scene
    >>> scene = build_scene("cornell")
    >>> camera = build_camera("cornell", aspect=1.0)
"""

from dataclasses import dataclass

from rayt.camera.pinhole import Camera
from rayt.geometry.rect import Plane
from rayt.materials.diffuse_light import DiffuseLight
from rayt.materials.lambertian import Lambertian
from rayt.scene.scene import Scene
from rayt.scene.shapes import Box, Rect, ShapeList, Sphere

# Standard Cornell box dimensions
BOX_SIZE = 555.0

RED_ALBEDO = (0.65, 0.05, 0.05)
GREEN_ALBEDO = (0.12, 0.45, 0.15)
WHITE_ALBEDO = (0.73, 0.73, 0.73)
LIGHT_EMISSION = (15.0, 15.0, 15.0)


@dataclass(frozen=True)
class CameraSetup:
    """Look-at parameters of a built-in scene's camera."""

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float

    def build(self, aspect: float) -> Camera:
        return Camera.from_lookat(self.lookfrom, self.lookat, self.vup, self.vfov, aspect)


CAMERAS = {
    "cornell": CameraSetup(
        lookfrom=(278.0, 278.0, -800.0),
        lookat=(278.0, 278.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=40.0,
    ),
    "two_spheres": CameraSetup(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, 1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
    ),
}


def build_cornell_box(box_size: float = BOX_SIZE) -> Scene:
    """Create the Cornell box scene.

    Coordinates scale linearly with box_size; the light and boxes keep their
    classic proportions.

    Args:
        box_size: Edge length of the enclosure.

    Returns:
        The scene, with a black background.
    """
    s = box_size / BOX_SIZE
    red = Lambertian(albedo=RED_ALBEDO)
    green = Lambertian(albedo=GREEN_ALBEDO)
    white = Lambertian(albedo=WHITE_ALBEDO)
    light = DiffuseLight(emission=LIGHT_EMISSION)

    walls = ShapeList(
        [
            # Left wall (x = size), seen on the left from the camera at z < 0
            Rect(Plane.YZ, 0.0, box_size, 0.0, box_size, box_size, green, normal=(-1.0, 0.0, 0.0)),
            Rect(Plane.YZ, 0.0, box_size, 0.0, box_size, 0.0, red, normal=(1.0, 0.0, 0.0)),
            # Light just below the ceiling, facing down into the box
            Rect(
                Plane.XZ,
                213.0 * s,
                343.0 * s,
                227.0 * s,
                332.0 * s,
                554.0 * s,
                light,
                normal=(0.0, -1.0, 0.0),
            ),
            Rect(Plane.XZ, 0.0, box_size, 0.0, box_size, 0.0, white, normal=(0.0, 1.0, 0.0)),
            Rect(Plane.XZ, 0.0, box_size, 0.0, box_size, box_size, white, normal=(0.0, -1.0, 0.0)),
            Rect(Plane.XY, 0.0, box_size, 0.0, box_size, box_size, white, normal=(0.0, 0.0, -1.0)),
        ]
    )
    walls.add(Box((130.0 * s, 0.0, 65.0 * s), (295.0 * s, 165.0 * s, 230.0 * s), white))
    walls.add(Box((265.0 * s, 0.0, 295.0 * s), (430.0 * s, 330.0 * s, 460.0 * s), white))
    return Scene(walls, background=(0.0, 0.0, 0.0))


def build_two_spheres() -> Scene:
    """Create a sphere resting on a large ground sphere under a white sky."""
    grey = Lambertian(albedo=(0.5, 0.5, 0.5))
    return Scene(
        [
            Sphere(center=(0.0, 0.0, 1.0), radius=0.5, material=grey),
            Sphere(center=(0.0, -100.5, 1.0), radius=100.0, material=grey),
        ],
        background=(1.0, 1.0, 1.0),
    )


_BUILDERS = {
    "cornell": build_cornell_box,
    "two_spheres": build_two_spheres,
}

SCENE_NAMES = tuple(_BUILDERS)


def _check_name(name: str) -> None:
    if name not in _BUILDERS:
        raise ValueError(f"Unknown scene {name!r}. Available: {', '.join(SCENE_NAMES)}")


def build_scene(name: str = "cornell") -> Scene:
    """Construct a built-in scene by name.

    Raises:
        ValueError: If name is not one of SCENE_NAMES.
    """
    _check_name(name)
    return _BUILDERS[name]()


def build_camera(name: str = "cornell", aspect: float = 1.0) -> Camera:
    """Construct the camera that frames a built-in scene.

    Raises:
        ValueError: If name is not one of SCENE_NAMES.
    """
    _check_name(name)
    return CAMERAS[name].build(aspect)
