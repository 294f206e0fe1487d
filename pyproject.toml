[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oamworkloads"
version = "0.1.0"
description = "Build and manage Kubernetes Deployments, Jobs and Services for OAM workload types"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["kubernetes", "oam", "workload", "deployment", "job", "service", "configmap"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["oamworkloads"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
