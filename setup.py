from setuptools import setup, find_packages

VERSION_STRING = '0.1.0'

setup(
    name="kite-scenarios",
    packages=find_packages(exclude=['tests', 'tests.*']),
    version = VERSION_STRING,
    license="MIT",
    description="Declarative HTTP scenario runner for integration tests",
    python_requires='>=3.9',
    install_requires=[
        'requests>=2.27',
        'jsonpath-ng>=1.5',
        'pydantic>=2.0',
    ],
    extras_require={
        'test': ['pytest>=7', 'responses>=0.23', 'hypothesis>=6.84'],
    },
    zip_safe=False,
    include_package_data=True,
    keywords = ['http', 'testing', 'scenario', 'jsonpath'],
    classifiers=[],
)
