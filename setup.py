from setuptools import find_packages, setup

setup(
    name="nerdfetch",
    version="0.1.0",
    description="Interactively select, download and install Nerd Fonts",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "requests",
        "urllib3",
        "pick",
        "PyYAML",
        "rich",
        "platformdirs",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "nerdfetch=nerdfetch.cli:main",
        ],
    },
)
