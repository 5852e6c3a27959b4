# -*- coding: utf-8 -*-

from setuptools import setup, find_packages


setup(
    name="beatblox",
    version="0.2.0",
    description="Transcribes MIDI note events into notated durations: notes, rests, chords, ties and triplets",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["beatblox", "beatblox.*"]),
    python_requires=">=3.8",
    install_requires=[
        "mido",
        "more-itertools",
    ],
    extras_require={
        "test": ["parameterized", "pytest"],
    },
    entry_points={"console_scripts": []},
    scripts=["tools/midiToText.py"],
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: Developers",
        'License :: OSI Approved :: MIT License',
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
