[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "royalur"
version = "0.1.0"
description = "The Royal Game of Ur in the terminal, with random, heuristic and Monte Carlo tree search opponents"
requires-python = ">=3.10"
dependencies = []
keywords = ["royal game of ur", "board game", "mcts", "ai", "terminal"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
royalur = "royalur.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["royalur"]

[tool.pytest.ini_options]
addopts = "-ra"
