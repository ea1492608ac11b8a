from setuptools import setup, find_packages

setup(
    name="curriculum-scheduler",
    version="1.0.0",
    description="An automated class scheduler for curriculum enrollment requests",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "ortools>=9.11.0",
        "numpy>=1.20.0",
        "pandas>=1.5.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "curriculum-scheduler=curriculum_scheduler.cli:main",
        ],
    },
    python_requires=">=3.11",
)
