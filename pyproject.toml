[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ssestream"
version = "1.1.1"
description = "Client for streams of Server-Sent Events"
requires-python = ">=3.10"
dependencies = []
keywords = ["sse", "event-source", "server-sent-events", "http", "client"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ssestream"]

[tool.pytest.ini_options]
addopts = "-ra"
