"""Background model loading.

Parsing runs on a thread pool and never touches OpenGL, so a slow or broken
file cannot stall a frame. Callers get a Future per request and decide on
the main thread what to do with the result.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from config import LOADER_WORKERS
from loaders.gltf_loader import GLTFResult, load_gltf
from loaders.obj_loader import load_mtl, load_obj


def _load_obj_with_materials(obj_path: str, mtl_path: Optional[str]) -> GLTFResult:
    materials = load_mtl(mtl_path) if mtl_path else {}
    return GLTFResult(scene=load_obj(obj_path, materials))


class AssetLoader:
    def __init__(self, max_workers: int = LOADER_WORKERS) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asset-loader")
        self.requested = 0

    def submit(self, fn: Callable, *args) -> Future:
        self.requested += 1
        return self._executor.submit(fn, *args)

    def load_gltf(self, path: str) -> Future:
        return self.submit(load_gltf, path)

    def load_obj(self, obj_path: str, mtl_path: Optional[str] = None) -> Future:
        """Each call parses the files again; results are never shared."""
        return self.submit(_load_obj_with_materials, obj_path, mtl_path)

    def shutdown(self, cancel_futures: bool = True) -> None:
        self._executor.shutdown(wait=False, cancel_futures=cancel_futures)
