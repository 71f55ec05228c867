"""
Setup script for kmeans package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()
    long_description_content_type = 'text/markdown'

# Get the code version
version = {}
with open(path.join(here, "kmeans/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='kmeans-clusterer',
    version=__version__,
    description='K-means clustering with Lloyd and kd-tree filtering assignment',
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords='kmeans clustering kd-tree machine-learning',
    packages=find_packages(include=['kmeans*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.17',
        'scikit-learn>=1.1',  # silhouette score in kmeans.utils
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'kmeans=kmeans.cli:main',
        ],
    },
)
