[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bddfour"
version = "0.1.0"
description = "Node pools, unique tables and garbage collection for binary decision diagrams, plus Connect Four bitboard utilities."
requires-python = ">=3.10"
dependencies = []
keywords = ["bdd", "binary decision diagram", "unique table", "connect four", "bitboard"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bddfour"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
