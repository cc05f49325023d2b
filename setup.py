import setuptools

setuptools.setup(
    name="force_empty_bucket",
    version="1.0.0",
    description=("Command-line tool to force-empty an S3 bucket, including all object versions and delete markers"),
    package_dir={"": "force_empty_bucket"},
    packages=setuptools.find_namespace_packages(where="force_empty_bucket", exclude=["*__pycache__*"]),
    scripts=["force_empty_bucket.py"],
    install_requires=[
        "boto3",
        "click",
        "coloredlogs",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires=">=3.9",
)
