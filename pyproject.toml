[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iccarus"
version = "0.1.0"
description = "Parse ICC colour profile headers, tag tables and tag data"
requires-python = ">=3.10"
dependencies = []
keywords = ["icc", "color", "colour", "profile", "color-management", "clut", "curves"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["iccarus"]

[tool.hatch.build.targets.sdist]
include = ["iccarus", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
