[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "corekv"
version = "0.1.0"
description = "Building blocks for an LSM key-value store: bloom filters, a TinyLFU cache, byte arena and log codecs"
requires-python = ">=3.10"
dependencies = []
keywords = ["key-value", "lsm", "bloom-filter", "cache", "tinylfu", "wal", "storage"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["corekv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
