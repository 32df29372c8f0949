#!/usr/bin/env python3
"""
Set up the package
"""

# Standard inputs
import os

# Third party inputs
from setuptools import setup, find_packages

# Find the version
version = {}
with open(
        os.path.join('stx_typer', 'version.py'), 'r',
        encoding='utf-8') as version_file:
    exec(version_file.read(), version)

# Read the contents of your README file
with open('README.md', 'r', encoding='utf-8') as f:
    long_description = f.read()

# Open the requirements.txt file
with open('requirements.txt', encoding='utf-8') as f:
    # Each line should be a separate requirement
    requirements = [
        line.strip() for line in f.read().splitlines() if line.strip()
    ]

setup(
    name="StxTyper",
    version=version['__version__'],
    long_description=long_description,
    # The content type of the long description. Necessary for PyPI
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'stxtyper=stx_typer.stx:cli'
        ]
    },
    install_requires=requirements,
    extras_require={
        'test': ['pytest']
    },
    python_requires='>=3.9',
    # Classifiers categorize the project for users.
    classifiers=[
        # Specifies the intended audience of the project
        'Intended Audience :: Science/Research',
        # Specifies the supported Python versions
        'Programming Language :: Python :: 3.9',
        # Specifies the topic related to the project
        'Topic :: Scientific/Engineering :: Bio-Informatics',
    ],
)
