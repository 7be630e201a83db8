[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "airctl"
version = "0.1.0"
description = "Air traffic control simulation with speed-violation notices, an airline portal and a payment desk linked by named pipes"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = [
    "simulation",
    "air traffic control",
    "runway",
    "named pipes",
    "fifo",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: X11 Applications",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
airctl-atc = "airctl.atc:main"
airctl-generator = "airctl.generator:main"
airctl-portal = "airctl.portal:main"
airctl-stripepay = "airctl.stripepay:main"

[tool.hatch.build.targets.wheel]
packages = ["airctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
