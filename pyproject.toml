[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vjudge"
version = "0.1.0"
description = "HTTP front end for an online judge: browse problems, submit code and poll verdicts from remote execution workers"
requires-python = ">=3.10"
keywords = ["online-judge", "judge", "competitive-programming", "flask", "rabbitmq"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Education :: Testing",
]
dependencies = [
    "flask",
    "sqlalchemy",
    "redis",
    "pika",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vjudge = "vjudge.app:main"

[tool.hatch.build.targets.wheel]
packages = ["vjudge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
