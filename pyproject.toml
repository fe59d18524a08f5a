[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "twistyimport"
version = "0.1.0"
description = "Import TwistyTimer solve exports (CSV) into a MySQL database"
requires-python = ">=3.10"
keywords = ["cubing", "twistytimer", "speedcubing", "csv", "mysql", "import"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "pymysql",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
twistyimport = "twistyimport.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["twistyimport"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
