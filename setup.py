from setuptools import setup, find_packages

setup(
    name="wallet-rebalancer",
    version="1.0.0",
    author="Wallet Rebalancer Team",
    description="Portfolio rebalancing engine that batches approvals and swaps into one atomic wallet operation",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "wallet_connector_base": ["py.typed"],
        "rebalance_calculator": ["py.typed"],
        "oneinch_connector": ["py.typed"],
        "wallet_clients": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "aiohttp==3.12.15",
        "PyYAML==6.0.2",
        "eth-abi>=5.0.0",
        "eth-utils>=4.0.0",
        "eth-hash[pycryptodome]",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    python_requires=">=3.11",
)
