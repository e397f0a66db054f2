from .sun import SunParameters, sun_direction
from .placement import AssetPlacer, ModelPlacement
from .oceanscene import OceanScene

__all__ = ["AssetPlacer", "ModelPlacement", "OceanScene", "SunParameters", "sun_direction"]
