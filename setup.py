"""Setup script for foundry_sim package."""

from setuptools import setup, find_packages

setup(
    name='foundry_sim',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'foundry_sim': ['data/*.yaml'],
    },
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.20.0',
        'pyyaml>=5.4',
        'matplotlib>=3.3.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'foundry-sim=foundry_sim.cli:main',
        ],
    },
)
