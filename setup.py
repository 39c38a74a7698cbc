"""Setup configuration for prpickup"""

from setuptools import setup, find_packages

setup(
    name="pr-pickup-report",
    version="0.1.0",
    description=(
        "CLI tool for GitHub pull request KPIs: business-time pickup time "
        "and merge time, via the GitHub CLI."
    ),
    author="PR Pickup Report Contributors",
    author_email="",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "python-dateutil>=2.8.2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
            "types-python-dateutil",
        ],
    },
    entry_points={
        "console_scripts": [
            "prpickup=prpickup.main:main",
        ],
    },
)
