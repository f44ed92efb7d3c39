[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vaultworks"
version = "0.1.0"
description = "In-memory asset ledger with token creation, token sales, ticketing, a name service and utility-token services"
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "tokens", "vault", "badge", "name-service", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vaultworks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
