# setup.py
"""Setup script for the Photo De-duplication Tool."""

import os

from setuptools import setup, find_packages

setup(
    name="photo-dedup-tool",
    version="1.0.0",
    description="Find near-duplicate photos by perceptual hash and keep the best one",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Photo Dedup Team",
    packages=find_packages(include=["photo_dedup", "photo_dedup.*"]),
    python_requires=">=3.10",
    install_requires=[
        "Pillow>=8.0.0",
        "imagehash>=4.0.0",
        "tqdm>=4.50.0",
        "numpy>=1.22.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "photo-dedup=photo_dedup.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
    ],
)
