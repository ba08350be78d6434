[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inkgames"
version = "0.1.0"
description = "Game logic for e-paper readers: a seeded dungeon crawler core, a falling-block puzzle and 2048"
requires-python = ">=3.10"
dependencies = []
keywords = ["roguelike", "dungeon", "procedural-generation", "tetris", "2048", "e-paper", "game"]
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
    "Topic :: Games/Entertainment :: Role-Playing",
    "Topic :: Games/Entertainment :: Puzzle Games",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["inkgames"]

[tool.pytest.ini_options]
addopts = "-ra"
