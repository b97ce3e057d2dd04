[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rkvs"
version = "0.1.0"
description = "A small length-prefixed request/response TCP echo server and client"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "event-loop", "protocol", "echo", "pipelining", "framing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rkvs-server = "rkvs.server:main"
rkvs-client = "rkvs.client:main"

[tool.hatch.build.targets.wheel]
packages = ["rkvs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
