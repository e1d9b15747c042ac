from setuptools import setup, find_packages


setup(
    name="bloc",
    version="0.1.0",
    description="Chosen-plaintext attacks against block cipher encryption oracles",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.6",
    install_requires=[
        "cryptography>=2.7",
    ],
    extras_require={
        "debug": ["pytest>=5.3.2"],
        "test": ["pytest>=5.3.2"],
    }
)
