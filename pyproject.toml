[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "snailnet"
version = "0.1.0"
description = "A small framed link-layer packet protocol over raw sockets or BPF devices"
requires-python = ">=3.10"
dependencies = []
keywords = ["raw socket", "bpf", "link layer", "packet", "protocol", "checksum"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Operating System :: POSIX :: BSD :: FreeBSD",
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
snail-server = "snailnet.cli:server_main"
snail-client = "snailnet.cli:client_main"

[tool.setuptools.packages.find]
include = ["snailnet*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
