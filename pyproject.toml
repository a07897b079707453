[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gslog"
version = "0.1.0"
description = "Leveled logging building blocks: text and JSON formatters, buffered writers, and stream, file, console and email handlers"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "log-level", "handler", "formatter", "json", "buffered-writer"]
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
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gslog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
