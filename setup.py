"""
Weather Plugin Host Setup Configuration

Makes the sample weather plugin and its reference host installable, so that
tests and plugins can import from 'src' and 'plugins'.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_file.exists():
    requirements = [
        line.strip()
        for line in requirements_file.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="adorika-weather-plugin",
    version="1.0.0",
    description="Sample weather forecast plugin with a FastAPI reference host",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Sample Plugin Developer",
    license="MIT",

    # Package discovery
    packages=find_packages(include=["src", "src.*", "plugins", "plugins.*"]),

    # Dependencies
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "hypothesis>=6.80.0",
            "httpx>=0.24.0",
        ],
    },

    # Python version requirement
    python_requires=">=3.10",

    # Entry points
    entry_points={
        "console_scripts": [
            "weather-plugin-host=src.main:main",
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: FastAPI",
    ],

    keywords="plugin lifecycle weather forecast fastapi sample",
)
