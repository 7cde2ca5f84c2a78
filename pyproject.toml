[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aistiles"
version = "0.1.0"
description = "Measured vessel trajectories: segmentation, stop detection and rasterisation to map tiles"
requires-python = ">=3.10"
dependencies = []
keywords = ["ais", "trajectory", "gis", "tiles", "dbscan", "wkb", "geodesic"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aistiles"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
