[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rowforge"
version = "0.1.0"
description = "Turn raw data-source results into typed table rows: column value extractors, type convertors and a row transformer."
requires-python = ">=3.10"
dependencies = []
keywords = ["etl", "transform", "extractor", "type-conversion", "rows", "schema"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rowforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
