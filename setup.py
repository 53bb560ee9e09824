#!/usr/bin/env python3
"""
Setup script for the vq vector quantization library.
"""

from setuptools import setup, find_packages

# Read README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="vq",
    version="0.1.3",
    author="Varshith",
    author_email="varshith.gudur17@gmail.com",
    description="Vector quantization algorithms for compressing high-dimensional vectors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/varshith-Git/vq",
    project_urls={
        "Bug Tracker": "https://github.com/varshith-Git/vq/issues",
        "Source Code": "https://github.com/varshith-Git/vq",
    },
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "pytest-xdist>=2.0",
            "black>=21.0",
            "flake8>=3.8",
            "mypy>=0.910",
        ],
        "benchmark": [
            "psutil>=5.8",
        ],
    },
    include_package_data=True,
    package_data={
        "vq": ["py.typed"],
    },
    zip_safe=False,
)
