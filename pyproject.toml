[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bubbleapp"
version = "0.1.0"
description = "Functional components, hooks, layout, focus, routing and scrollable viewports for terminal user interfaces"
requires-python = ">=3.10"
keywords = ["tui", "terminal", "components", "hooks", "layout", "router", "viewport"]
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
    "Topic :: Software Development :: User Interfaces",
    "Topic :: Terminals",
]
dependencies = [
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bubbleapp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
