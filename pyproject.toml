[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arbsim"
version = "0.1.0"
description = "Simulated cross-DEX arbitrage detection, a StatelessVM transaction executor with retries and mock fallback, and a service health check"
requires-python = ">=3.10"
dependencies = []
keywords = ["arbitrage", "dex", "flash-loan", "simulation", "trading", "statelessvm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
arbsim-demo = "arbsim.arbitrage:main"
arbsim-health = "arbsim.health:main"

[tool.hatch.build.targets.wheel]
packages = ["arbsim"]

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
strict = true
