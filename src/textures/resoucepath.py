ASSETS_PATH: str = "./assets/"
TEXTURES_PATH: str = ASSETS_PATH + "textures/"
MODELS_PATH: str = ASSETS_PATH + "model/"

WATER_NORMALS_TEXTURE_PATH: str = TEXTURES_PATH + "sea1/waternormals.png"

# Models
SUBMARINE_MODEL_PATH: str = MODELS_PATH + "submarine.glb"
BIRDS_MODEL_PATH: str = MODELS_PATH + "birds.glb"
ISLAND_MODEL_PATH: str = MODELS_PATH + "island3.obj"
ISLAND_MATERIAL_PATH: str = MODELS_PATH + "island3.mtl"
