[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matchkit"
version = "0.1.0"
description = "Matchers for test assertions with descriptive failure messages"
requires-python = ">=3.10"
keywords = ["testing", "matchers", "assertions", "json", "xml", "yaml", "http", "bipartite-matching"]
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
    "Topic :: Software Development :: Testing",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["matchkit"]

[tool.pytest.ini_options]
addopts = "-ra"
