[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hairline_defense"
version = "0.1.0"
description = "Order book with price-time matching and cross-trade risk control for equity orders"
requires-python = ">=3.10"
dependencies = []
keywords = ["trading", "matching-engine", "order-book", "risk-control"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hairline_defense"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
