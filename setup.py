# -*- coding: utf-8 -*-

from setuptools import setup, find_packages


setup(
    name="sim6502",
    version="0.4.0",
    description="Cycle-accurate 6502/6510/65C02 processor emulation for testing machine language code",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="sim6502 developers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "more-itertools",
    ],
    extras_require={
        "test": [
            "parameterized",
        ],
    },
    entry_points={"console_scripts": []},
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: Developers",
        'License :: OSI Approved :: MIT License',
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: System :: Emulators",
    ],
)
