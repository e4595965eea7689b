[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dxfm"
version = "0.1.0"
description = "Fixed-point building blocks for six-operator FM synthesis compatible with DX7 voice data"
requires-python = ">=3.10"
dependencies = []
keywords = ["fm", "synthesis", "dx7", "envelope", "lfo", "fixed-point", "fir"]
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
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["dxfm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
