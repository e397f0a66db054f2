class AssetLoadError(RuntimeError):
    """A model or material file could not be turned into scene data."""
