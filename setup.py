#!/usr/bin/env python
"""
psmqc: summarize peptide-spectrum matches of a proteomics search for quality control.
"""

from setuptools import setup, find_packages

version = '0.1.0'


def readme():
    with open('README.md') as f:
        return f.read()


setup(
    name='psmqc',
    version=version,
    description='Python package that summarizes PSMs, peptides and proteins passing score and FDR thresholds',
    long_description=readme(),
    long_description_content_type='text/markdown',
    keywords='Proteomics, PSM, FDR, quality control',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=[
        'click',
        'pandas',
        'numpy'
    ],
    extras_require={
        'test': [
            'pytest'
        ]
    },
    entry_points={
        'console_scripts': [
            'psmqc = psmqc.cli:main'
        ]
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: POSIX',
        'Operating System :: Unix',
        'Programming Language :: Python',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
    ],
)
