[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vcu_control"
version = "0.1.0"
description = "Vehicle control unit logic for an electric race car: status words, inverter CAN payloads, pedal handling, launch and traction control."
requires-python = ">=3.10"
dependencies = []
keywords = ["vcu", "can", "inverter", "pedal", "launch-control", "traction-control", "electric-vehicle"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vcu_control"]

[tool.pytest.ini_options]
addopts = "-ra"
