[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tracerpipe"
version = "0.1.0"
description = "SQL builders and configuration for a bronze/silver telemetry pipeline of processes, open files and network packets"
requires-python = ">=3.11"
dependencies = []
keywords = ["monitoring", "sql", "duckdb", "pipeline", "telemetry", "processes", "open-files"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tracerpipe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
