[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hotelbooking"
version = "0.1.0"
description = "A small HTTP service for registering clients, booking hotels and tracking their payments"
requires-python = ">=3.10"
keywords = ["booking", "hotel", "flask", "payments", "rest", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]
dependencies = [
    "flask>=3.0",
    "requests>=2.28",
    "sqlalchemy>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
hotelbooking = "hotelbooking.app:main"

[tool.hatch.build.targets.wheel]
packages = ["hotelbooking"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
