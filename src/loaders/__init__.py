from .errors import AssetLoadError
from .gltf_loader import GLTFResult, load_gltf
from .obj_loader import load_mtl, load_obj
from .asset_loader import AssetLoader

__all__ = ["AssetLoadError", "AssetLoader", "GLTFResult", "load_gltf", "load_mtl", "load_obj"]
