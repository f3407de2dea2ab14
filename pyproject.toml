[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dnsbench"
version = "0.9.1"
description = "Find the fastest DNS server in your location to improve internet browsing experience."
requires-python = ">=3.11"
keywords = ["dns", "network", "cli", "benchmark"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Benchmark",
    "Topic :: System :: Networking",
]
dependencies = [
    "dnspython",
    "tomli-w",
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dnsbench = "dnsbench.app:main"

[tool.hatch.build.targets.wheel]
packages = ["dnsbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
