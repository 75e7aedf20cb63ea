[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "verscli"
version = "0.1.0"
description = "Command-line client for Vers clusters and VMs: cluster trees, HEAD tracking, deletion helpers and self-upgrade"
requires-python = ">=3.11"
keywords = ["vers", "vm", "cluster", "cli", "virtual-machines"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
vers = "verscli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["verscli"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
