from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="gh-batch-archive",
    version="1.0.0",
    description="Batch archive or unarchive GitHub repositories via the GitHub CLI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "gh-batch-archive=gh_batch_archive.main:main",
        ],
    },
    install_requires=["questionary", "prompt_toolkit"],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Version Control :: Git",
    ],
    keywords=["github", "gh", "archive", "cli", "repositories"],
)
