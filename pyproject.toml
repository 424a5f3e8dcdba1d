[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dovirpu"
version = "0.1.0"
description = "Read and write Dolby Vision RPU metadata structures and ST 2094-10 T.35 payloads"
requires-python = ">=3.10"
dependencies = []
keywords = ["dolby-vision", "rpu", "hdr", "hevc", "metadata", "st2094-10"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dovirpu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
