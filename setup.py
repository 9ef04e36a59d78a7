# setup.py
from setuptools import setup, find_packages

setup(
    name="grepurl",
    version="1.1.0",
    description="Extract and filter URLs from HTML documents",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "grepurl=grepurl.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
