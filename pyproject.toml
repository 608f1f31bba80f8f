[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reformant"
version = "0.1.0"
description = "Speech analysis routines (analysis windows, LPC, peak finding) and an order-preserving INI reader and writer"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "speech", "lpc", "linear prediction", "window", "peaks", "ini"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["reformant"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
