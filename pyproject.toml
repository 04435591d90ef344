[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "todoskel"
version = "0.1.0"
description = "Layered service skeleton for a todo-list API, with a log store, queue-message consumers and an interval scheduler"
requires-python = ">=3.10"
keywords = [
    "skeleton",
    "rest-api",
    "todo",
    "flask",
    "mongodb",
    "clean-architecture",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: Flask",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "flask",
    "pymongo",
    "bcrypt",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
todoskel-api = "todoskel.app:main"
todoskel-scheduler = "todoskel.scheduler:main"

[tool.hatch.build.targets.wheel]
packages = ["todoskel"]

[tool.hatch.build.targets.sdist]
include = [
    "todoskel",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"
