# setup.py
from setuptools import setup, find_packages

setup(
    name="jkconvert",
    version="0.1.0",
    packages=find_packages(include=['jkconvert', 'jkconvert.*']),
    install_requires=[
        "construct>=2.10",
        "numpy>=1.21",
        "Pillow>=9.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    python_requires=">=3.8",
    description="Decode Jedi Knight level (JKL) and material (MAT) files into OBJ meshes and PGM images",
    keywords="jkl, mat, obj, pgm, level, conversion",
    entry_points={
        'console_scripts': [
            'jkconvert=jkconvert.main:main',
        ],
    }
)
