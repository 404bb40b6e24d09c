"""Setup script for the sensorboard package."""

from setuptools import find_packages, setup

setup(
    name="sensorboard",
    version="0.1.0",
    description="Environmental sensor dashboard and retention cleanup job",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "aiohttp",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "sensorboard-retention=sensorboard.retention:main",
            "sensorboard-dashboard=sensorboard.display:main",
        ],
    },
)
