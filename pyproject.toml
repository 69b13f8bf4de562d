[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sinjoh"
version = "0.1.0"
description = "Readers for Pokémon Platinum data files and a SQL explorer for the game data"
requires-python = ">=3.10"
keywords = ["nintendo-ds", "narc", "pokemon", "platinum", "sqlite", "bdhc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Database",
]
dependencies = [
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sinjoh = "sinjoh.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sinjoh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
