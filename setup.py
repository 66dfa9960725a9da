#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Setup script for csv2geojson package.
"""

from setuptools import setup, find_packages

# Read the README.md for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Main setup configuration
setup(
    name="csv2geojson",
    version="0.1.0",
    description="Convert CSV files of geolocated IP lookups into GeoJSON FeatureCollections",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",

    # Package configuration
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",

    # Dependencies
    install_requires=[
        "python-dotenv>=0.21.0",
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
    ],

    # Dev dependencies
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "hypothesis>=6.0.0",
            "pylint>=2.15.0",
            "mypy>=1.0.0",
            "black>=23.0.0"
        ]
    },

    # Entry points
    entry_points={
        "console_scripts": [
            "csv2geojson=csv2geojson.__main__:main",
        ],
    },

    # Classifiers help users find your project
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: GIS",
    ],
)
