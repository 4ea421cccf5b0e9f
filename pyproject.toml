[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "decomm"
version = "0.1.0"
description = "Companion-computer building blocks: chunked UDP messaging between modules, a local JSON settings file, option parsing, Raspberry Pi detection, GPIO, LED and buzzer drivers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "drone",
    "uav",
    "udp",
    "intermodule",
    "raspberry-pi",
    "gpio",
    "led",
    "buzzer",
    "configuration",
    "getopt",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: System :: Hardware",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["decomm"]

[tool.hatch.build.targets.sdist]
include = ["decomm", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
