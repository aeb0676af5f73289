from setuptools import setup, find_packages

setup(
    name="lrc-engine",
    version="0.1.0",
    description="Parse LRC lyric files and fire time-synchronized per-line callbacks with play, pause, resume and seek",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"lrc_engine": ["py.typed"]},
    install_requires=[
        "colorama>=0.4.6",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "lrc-engine=lrc_engine.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Software Development :: Libraries",
    ],
    keywords="lyrics lrc synchronized karaoke parser scheduler",
)
