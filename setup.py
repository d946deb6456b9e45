from setuptools import setup, find_packages

setup(
    name="tandem_suffix_package",
    version="0.1.0",
    description="Ukkonen suffix tree construction with substring search and tandem repeat detection",
    packages=find_packages(where='.', include=['tandem_suffix_package', 'tandem_suffix_package.*']),
    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.19.0',
        'loguru>=0.7.0'
    ],
    extras_require={
        'test': ['pytest>=7.0'],
        # Only needed for benchmark.py
        'benchmark': ['pandas', 'matplotlib'],
    },
    zip_safe=False
)
