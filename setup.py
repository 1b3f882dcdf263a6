from setuptools import setup
from setuptools import find_packages

setup(
    name='ThreeBody',
    version='0.0.1',
    description='An adaptive Runge-Kutta simulator of the planar '
                'gravitational three-body problem',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*', 'examples']),
    install_requires=[
        'numpy',
        'sympy',
        'matplotlib',
    ],
    extras_require={
        'test': [
            'pytest',
            'scipy',
        ],
    },
    include_package_data=True,
    zip_safe=False)
