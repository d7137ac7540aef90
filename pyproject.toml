[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fargate-cli"
version = "0.1.0"
description = "Building blocks for deploying and managing serverless containers on AWS Fargate"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["aws", "fargate", "ecs", "containers", "deployment", "cloudwatch", "acm"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fargate_cli"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
