from setuptools import setup, find_packages

setup(
    name="photo-renamer",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "Pillow>=9.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "photo-renamer=photo_renamer.cli:main",
        ],
    },
    python_requires=">=3.9",
)
