[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pacesim"
version = "0.1.0"
description = "Instruction set tools for a processing-element array: configuration encoding, mnemonics, FP8 arithmetic and AGU programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["cgra", "assembler", "isa", "fp8", "agu", "configuration"]
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
    "Topic :: Software Development :: Assemblers",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
convert-agu = "pacesim.cli:convert_agu_main"
convert-config = "pacesim.cli:convert_config_main"

[tool.hatch.build.targets.wheel]
packages = ["pacesim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
