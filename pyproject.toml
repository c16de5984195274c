[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diningphilo"
version = "1.0.0"
description = "A dining philosophers simulation with a fixed-forks runner and a pooled-forks runner"
requires-python = ">=3.10"
dependencies = []
keywords = ["dining philosophers", "concurrency", "simulation", "threads", "semaphores"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
philo = "diningphilo.cli:main"
philo-bonus = "diningphilo.cli:main_bonus"

[tool.hatch.build.targets.wheel]
packages = ["diningphilo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
