from setuptools import setup, find_packages

setup(
    name="twitlinks",
    version="0.1",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "pandas",
        "requests",
        "urllib3>=1.26",
        "openpyxl",
        "tqdm",
        "orjson",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["twitlinks=twitlinks.cli:main"],
    },
    python_requires=">=3.8",
)
