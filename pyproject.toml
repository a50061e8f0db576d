[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chproto"
version = "0.1.0"
description = "Native binary protocol building blocks for ClickHouse: codecs, LZ4 framing, CityHash checksums, column types and data blocks"
requires-python = ">=3.10"
dependencies = []
keywords = ["clickhouse", "database", "binary-protocol", "lz4", "cityhash", "columnar"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
