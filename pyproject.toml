[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "termsurvey"
version = "0.1.0"
description = "Interactive terminal prompts: a filterable selection list, validators, transformers and a small ANSI terminal toolkit."
requires-python = ">=3.10"
dependencies = []
keywords = ["terminal", "prompt", "survey", "cli", "ansi", "interactive", "select"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["termsurvey"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
