[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecsnetsim"
version = "0.1.0"
description = "Building blocks for modelling distributed stream processing across edge and cloud nodes"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "simulation",
    "stream-processing",
    "edge-computing",
    "cloud",
    "dataflow",
    "topology",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ecsnetsim = "ecsnetsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ecsnetsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
