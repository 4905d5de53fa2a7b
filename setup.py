#!/usr/bin/env python3
"""Setup script for Matrix Rain"""

from setuptools import setup, find_packages

setup(
    name="matrix-rain",
    version="1.0.0",
    author="Matrix Rain Team",
    description="The famous Matrix rain effect of falling green characters as a cli command",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["matrix_rain", "matrix_rain.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console :: Curses",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Terminals",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "Pillow>=9.1.0",
        "windows-curses>=2.3; sys_platform == 'win32'",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'matrix-rain=matrix_rain.cli:main',
        ],
    },
)
