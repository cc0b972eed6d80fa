[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "thetasketch"
version = "0.2.0"
description = "Theta sketches for approximate distinct counting over data streams"
requires-python = ">=3.10"
keywords = ["sketch", "theta", "cardinality", "probabilistic", "streaming", "kmv", "murmurhash3"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Information Analysis",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
thetasketch-demo = "thetasketch.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["thetasketch"]

[tool.pytest.ini_options]
addopts = "-ra"
