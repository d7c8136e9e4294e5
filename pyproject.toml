[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ume"
version = "0.1.0"
description = "Building blocks for a struct-of-arrays unstructured mesh: vectors, ragged arrays, a hierarchical datastore, binary I/O, partition communication and lazily computed entity fields"
requires-python = ">=3.10"
dependencies = []
keywords = ["mesh", "unstructured", "struct-of-arrays", "datastore", "physics"]
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
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ume"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
