"""
fhevmsdk Setup Configuration
"""
from pathlib import Path

from setuptools import setup, find_packages

setup(
    name="fhevmsdk",
    version="0.1.0",
    packages=find_packages(include=["fhevmsdk", "fhevmsdk.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.7.4",
        "pydantic-settings>=2.3.0",
        "web3>=6.20.1",
        "eth-account>=0.11.0",
        "python-json-logger>=3.1.0",
        "prometheus-client>=0.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fhevmsdk=fhevmsdk.cli:main",
        ],
    },
    author="fhevmsdk Team",
    description="Client toolkit for FHE-enabled confidential smart contracts",
    long_description=Path("README.md").read_text() if Path("README.md").exists() else "",
    long_description_content_type="text/markdown",
)
