[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelsio"
version = "0.1.0"
description = "Storage I/O layer for Pixels columnar files: byte buffers, bit masks, profilers, block-aligned local reads, request merging and read scheduling."
requires-python = ">=3.10"
keywords = ["pixels", "columnar", "storage", "io", "database", "scheduler", "bytebuffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Filesystems",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pixelsio"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
