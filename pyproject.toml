[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opium"
version = "0.1.0"
description = "Slab and arena allocators, an intrusive list, a red-black tree, djb2 hashing and small logging helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["slab", "arena", "allocator", "red-black tree", "linked list", "djb2"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["opium"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
