[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netsponge"
version = "0.1.0"
description = "Networking building blocks: byte buffers, wire-format integer parsing, file descriptors, a poll-based event loop, IPv4 addresses, sockets and TUN/TAP devices"
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "sockets", "event loop", "poll", "checksum", "tun", "tap", "parser"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
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

[tool.hatch.build.targets.wheel]
packages = ["netsponge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
