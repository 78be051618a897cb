[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lspcore"
version = "0.1.0"
description = "Building blocks for Language Server Protocol servers: JSON-RPC transport, message dispatch, protocol types, URIs and document drafts"
requires-python = ">=3.10"
dependencies = []
keywords = ["lsp", "language-server", "json-rpc", "protocol", "editor"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors :: Integrated Development Environments (IDE)",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lspcore"]

[tool.pytest.ini_options]
addopts = "-ra"
