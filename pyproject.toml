[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oblivperm"
version = "0.1.0"
description = "Waksman permutation networks, selection bits, and clear-text compaction, duplication and purification circuits"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "waksman",
    "permutation network",
    "selection bits",
    "bitonic sort",
    "compaction",
    "mersenne twister",
]
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
    "Topic :: Security :: Cryptography",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["oblivperm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
