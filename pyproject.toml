[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ekstools"
version = "0.1.0"
description = "Cluster configuration model, AMI resolution, availability zone selection and aws-auth ConfigMap editing for Amazon EKS"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["eks", "kubernetes", "aws", "ami", "availability-zones", "aws-auth"]
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
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ekstools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
