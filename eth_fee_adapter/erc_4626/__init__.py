"""ERC-4626 vault modelling.

- Share/asset conversion math
- Underlying vault interface the adapter deposits into
- In-memory and on-chain priced implementations of it
"""
