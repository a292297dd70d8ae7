[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitplumb"
version = "0.1.0"
description = "A thin interface to Git plumbing commands: object IDs, config, signing settings, references, trees, commits, tags and syncing."
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "plumbing", "references", "refspec", "signing", "version-control"]
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
    "Topic :: Software Development :: Version Control :: Git",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitplumb"]

[tool.pytest.ini_options]
addopts = "-ra"
