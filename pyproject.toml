[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reedline"
version = "0.39.0"
description = "Building blocks for interactive line editors: edit commands, events, history, hints and highlighting"
requires-python = ">=3.10"
dependencies = [
    "filelock",
]
keywords = ["readline", "line-editor", "history", "cli", "terminal", "hints", "highlighting"]
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
    "Environment :: Console",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["reedline"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
