[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gooddog"
version = "0.1.0"
description = "A rhythm platformer where you steer a running dog with keys and clicks, plus a built-in level editor"
requires-python = ">=3.10"
keywords = ["game", "platformer", "pygame", "level-editor", "arcade"]
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
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gooddog = "gooddog.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gooddog"]

[tool.pytest.ini_options]
addopts = "-ra"
