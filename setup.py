"""
Unbound Python SDK - Setup

Python client for the Unbound communications platform.
"""

from setuptools import setup, find_packages
import os

# Read the README
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

# Read version
about = {}
with open(os.path.join(here, "unbound", "__init__.py"), encoding="utf-8") as f:
    for line in f:
        if line.startswith("__version__"):
            about["__version__"] = line.split("=", 1)[1].strip().strip('"')
            break

setup(
    name="unbound-sdk",
    version=about["__version__"],
    author="Unbound Team",
    description="Python SDK for the Unbound communications platform",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["unbound", "unbound.*"]),
    python_requires=">=3.8",
    install_requires=[
        "httpx>=0.24.0",
    ],
    extras_require={
        "async": [
            "websockets>=11.0",
        ],
        "grpc": [
            "grpcio>=1.50",
            "protobuf>=4.22",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=4.0",
            "websockets>=11.0",
            "grpcio>=1.50",
            "protobuf>=4.22",
        ],
        "all": [
            "websockets>=11.0",
            "grpcio>=1.50",
            "protobuf>=4.22",
        ],
    },
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Telephony",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    keywords=[
        "unbound",
        "sms",
        "storage",
        "tts",
        "stt",
        "transcription",
        "sdk",
    ],
    package_data={
        "unbound": ["py.typed"],
    },
    zip_safe=False,
)
