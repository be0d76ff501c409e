import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="dnssec-chain",
    version="0.1.0",
    description="Check the DS/DNSKEY chain of trust along every delegation of a domain name.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.7",
    install_requires=[
        "dnspython>=2.0",
        "tabulate",
        "validators",
        "colorama",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["dnssec-chain=dnssec_chain.cli:main"]},
)
