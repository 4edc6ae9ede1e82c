"""Setup script for Agenda Lite, the personal-calendar recurrence engine."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, splitting out test-only dependencies
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        if "pytest" in line:
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="agenda-lite",
    version="0.1.0",
    description="Recurrence rule parsing and occurrence expansion for a personal calendar",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Agenda Team",
    # Package configuration
    packages=find_packages(include=["agenda_lite", "agenda_lite.*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar rrule recurrence agenda holidays",
    entry_points={
        "console_scripts": [
            "agenda-lite=agenda_lite.__main__:main",
        ],
    },
    package_data={
        "agenda_lite": [
            "data/*.yaml",
        ],
    },
    zip_safe=False,
)
