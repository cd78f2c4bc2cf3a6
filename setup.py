from setuptools import setup, find_packages

setup(
    name='nu-bundler',
    version='0.1.0',
    py_modules=['nubundle', 'builder'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'lark',
        'pydantic>=2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'nubundle = nubundle:main',
        ],
    },
)
