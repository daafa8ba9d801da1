[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "primegrid"
version = "0.1.0"
description = "A small distributed prime search: a server hands out number ranges over TCP and clients return the primes they find."
requires-python = ">=3.10"
dependencies = []
keywords = ["primes", "distributed", "tcp", "worker", "client-server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
primegrid-server = "primegrid.server:main"
primegrid-client = "primegrid.client:main"

[tool.hatch.build.targets.wheel]
packages = ["primegrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
