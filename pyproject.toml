[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "eternalmaze"
version = "0.1.0"
description = "A textured ray-casting maze explorer driven by .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "maze", "game", "xpm", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "pygame>=2.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
eternalmaze = "eternalmaze.app:main"

[tool.setuptools.packages.find]
include = ["eternalmaze*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
