[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gwingress"
version = "0.1.0"
description = "Gateway API ingress helpers: probe target discovery and load balancer status"
requires-python = ">=3.10"
dependencies = []
keywords = ["gateway-api", "ingress", "kubernetes", "probing", "load-balancer"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gwingress"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
