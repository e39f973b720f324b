#!/usr/bin/env python3
"""
Setup script for skelprune (pruning and simplification of 3D skeleton graphs)
"""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

requirements = [
    "numpy>=1.20.0",
    "networkx>=2.6",
    "matplotlib>=3.5.0",
]

setup(
    name="skelprune",
    version="0.1.0",
    description="Pruning of short edges, dead ends and vertex clusters in 3D skeleton graphs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["skelprune", "skelprune.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Image Processing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
        ],
    },
)
