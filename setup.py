#!/usr/bin/env python3
# encoding: utf-8

try:
    from setuptools import setup, find_packages
except ImportError:
    print('The setuptools package is required to install orcakit.')
    raise


setup(
    name='orcakit',
    version='1.0.0',
    description='Tools for running ORCA calculations on SLURM clusters and extracting their thermodynamics',
    author='orcakit Developers',
    license='GPL-3.0-or-later',
    packages=find_packages(include=['orcakit', 'orcakit.*']),
    package_data={'orcakit': ['testing/*/*']},
    python_requires='>=3.8',
    install_requires=['pyyaml'],
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': [
            'thermorca = orcakit.scripts.thermorca:main',
            'suborca = orcakit.scripts.suborca:main',
            'smiles2xyz = orcakit.scripts.smiles2xyz:main',
        ],
    },
)
