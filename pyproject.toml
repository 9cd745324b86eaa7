[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cocoattest"
version = "0.1.0"
description = "Key provider messages, image-layer key wrapping and sample TEE evidence for confidential containers"
requires-python = ">=3.10"
keywords = ["attestation", "confidential-computing", "key-provider", "tee", "encryption"]
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
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cocoattest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
