[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chwire"
version = "0.1.0"
description = "Native binary wire format of a column-oriented database: column codecs, data blocks, LZ4 block compression and CityHash checksums"
requires-python = ">=3.10"
dependencies = []
keywords = ["columnar", "database", "wire-protocol", "lz4", "cityhash", "binary"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
