[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memorybrain"
version = "0.1.0"
description = "A memory store modelled on human memory: strengthening, forgetting, semantic and procedural stores, duplicate merging and a text dashboard"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "memory",
    "llm",
    "embeddings",
    "semantic-search",
    "cosine-similarity",
    "sqlite",
    "deduplication",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["memorybrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
