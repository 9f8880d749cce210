#!/usr/bin/env python3
"""
Setup script for Focus Tracker
"""

from setuptools import find_packages, setup

setup(
    name="focus-tracker",
    version="0.1.0",
    description="Webcam focus tracking: blink rate, head pose and engagement per session",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy>=1.21.0",
        "opencv-python>=4.5.0",
        "mediapipe>=0.10.0",
        "PyYAML>=6.0",
        "pandas>=1.3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "focus-tracker=focus_tracker.main:main",
        ],
    },
)
