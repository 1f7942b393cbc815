# setup.py
from setuptools import setup, find_packages

setup(
    name='propshim',
    version='0.1.0',
    description='Props envelope and structural equivalence engine for keyed UI reconciliation runtimes.',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',

    # Finds the `propshim` and `propshim_cli` packages; tests stay out.
    packages=find_packages(exclude=['tests', 'tests.*']),

    install_requires=[
        'PyYAML',
        'typer',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # Creates an executable script named `propshim` that calls the `app`
    # object inside `propshim_cli.main`.
    entry_points={
        'console_scripts': [
            'propshim = propshim_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
