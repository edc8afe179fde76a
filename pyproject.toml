[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cranelib"
version = "0.0.8"
description = "Transform Kubernetes resource manifests through plugins that emit JSON patches and whiteout decisions"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kubernetes",
    "migration",
    "json-patch",
    "transform",
    "plugins",
    "manifests",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Systems Administration",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cranelib"]

[tool.hatch.build.targets.sdist]
include = ["cranelib", "tests", "pyproject.toml", "README.md"]

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
