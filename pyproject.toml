[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "galaxysim"
version = "0.1.0"
description = "Disk galaxy N-body simulation with camera, bloom kernel helpers, rectangle packing and text editing utilities"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["n-body", "simulation", "galaxy", "gravity", "physics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
galaxysim = "galaxysim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["galaxysim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
