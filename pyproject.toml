[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mp3tags"
version = "0.1.0"
description = "Read and write APE tags in MP3 files, plus a helper for pruning small-file directories"
requires-python = ">=3.10"
dependencies = []
keywords = ["mp3", "ape", "apev2", "tags", "metadata", "audio"]
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
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
handle-directory = "mp3tags.handle_directory:main"

[tool.hatch.build.targets.wheel]
packages = ["mp3tags"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
