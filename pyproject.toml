[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gemmsim"
version = "0.1.0"
description = "Bit-exact reference arithmetic and inference-driver logic for a quantized systolic-array matrix accelerator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "accelerator",
    "systolic-array",
    "quantization",
    "int8",
    "matmul",
    "neural-network",
    "fixed-point",
]
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
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["gemmsim"]

[tool.hatch.build.targets.sdist]
include = ["gemmsim", "tests", "pyproject.toml"]

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
