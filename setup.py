from setuptools import setup, find_namespace_packages

setup(
    name="opskit",
    version="1.0.0",
    description="Rotating dual-format log writer, password generator and orchestration job waiter",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["opskit", "opskit.*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'opskit=opskit.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
