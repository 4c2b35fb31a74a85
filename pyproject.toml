[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wiscvlog"
version = "0.1.0"
description = "A WiscKey-style value log: append-only record files with CRC32C framing, an in-memory key-to-location index and garbage collection"
requires-python = ">=3.10"
dependencies = []
keywords = ["wisckey", "value-log", "vlog", "key-value", "storage", "crc32c"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wiscvlog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
