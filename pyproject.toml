[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatkit"
version = "0.29.0"
description = "Helpers for LLM chat tools: prompt templates, glob expansion, document loaders, spinners and OpenAI-style completion payloads"
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "chat", "cli", "openai", "prompt", "sse"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["chatkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
