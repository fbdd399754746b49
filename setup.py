#!/usr/bin/env python3
"""
Setup script for PalmSense hand gesture classification engine
"""

from setuptools import setup, find_packages


setup(
    name="palmsense",
    version="0.1.0",
    description="Hand gesture classification engine for per-frame hand landmarks",
    packages=find_packages(include=["palmsense", "palmsense.*"]),
    package_data={"palmsense": ["config.default.yaml"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "PyYAML",
        "numpy",
        "opencv-python",
        "mediapipe",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "palmsense=palmsense.main:cli",
        ],
    },
)
