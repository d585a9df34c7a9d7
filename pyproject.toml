[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "widgetcore"
version = "0.1.0"
description = "Data-oriented widget core: value sameness, lenses, typed environments, localization, geometry and a node graph"
requires-python = ">=3.10"
dependencies = []
keywords = ["gui", "widgets", "lens", "localization", "fluent", "environment"]
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
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["widgetcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
