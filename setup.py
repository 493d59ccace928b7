"""Setup configuration for ssrp-discovery."""

from setuptools import setup, find_packages

setup(
    name="ssrp-discovery",
    version="0.1.0",
    description="SQL Server Resolution Protocol client for discovering SQL Server instances",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ssrp-discovery=ssrp_discovery.cli:main",
        ],
    },
)
