#!/usr/bin/env python
import os

from setuptools import setup, find_packages


def resource(*args):
    return os.path.join(os.path.abspath(os.path.join(__file__, os.pardir)),
                        *args)


def parse_requirements(filename):
    with open(resource(filename)) as f:
        lines = (line.split('#')[0].strip() for line in f)
        return [line for line in lines if line]


with open(resource('README.rst')) as f:
    long_description = f.read()


setup(
    name='adi_hci',
    version='0.1.0',
    description='Speckle subtraction for angular and reference differential '
                'imaging (ADI/RDI) in high-contrast imaging',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    license='MIT',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=parse_requirements('requirements.txt'),
    extras_require={"dev": parse_requirements('requirements-dev.txt')},
    classifiers=[
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: MacOS :: MacOS X',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Astronomy',
    ],
)
