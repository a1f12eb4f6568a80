[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "comicsticks"
version = "0.1.0"
description = "Core of a desktop xkcd comic viewer: comic cache, bookmarks, search index, saved state and theme rules."
requires-python = ">=3.10"
dependencies = []
keywords = ["xkcd", "comics", "viewer", "cache", "bookmarks", "search"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["comicsticks"]

[tool.hatch.build.targets.sdist]
include = ["comicsticks", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
