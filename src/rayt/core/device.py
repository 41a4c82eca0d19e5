"""Process-wide lock around Taichi device state.

Taichi fields (scene tables, camera, render target, readback slots) are
global to the process, and a kernel launch cannot overlap Python-scope field
access from another thread. Every public entry point that touches device
state does so under ``device_lock``, so render calls from several threads
serialize instead of clobbering each other's uploads and readbacks.

The lock is reentrant: an entry point may call another while holding it.

Example:
    >>> from rayt.core.device import device_lock
    >>> with device_lock:
    ...     scene.activate()
    ...     setup_camera(camera)
"""

import threading

device_lock = threading.RLock()
